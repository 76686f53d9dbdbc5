"""
Key-style conversion at the HTTP boundary.

Python code and the session use snake_case field names; the clinic backend
speaks camelCase JSON. Only top-level keys are converted.
"""
import re

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])([A-Z])')


def to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r'_\1', name).lower()


def camelize(data: dict) -> dict:
    return {to_camel(key): value for key, value in data.items()}


def snakeify(data: dict) -> dict:
    return {to_snake(key): value for key, value in data.items()}
