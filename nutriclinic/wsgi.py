"""
WSGI config for the Nutriclinic booking front-end.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'nutriclinic.settings.production')

application = get_wsgi_application()
