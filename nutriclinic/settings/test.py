from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

AXES_ENABLED = False

CLINIC_API_URL = 'http://backend.test/api'
SLOT_PROVIDER = 'static'
RAZORPAY_KEY_ID = 'rzp_test_key'

# Let pytest's caplog see application log records
LOGGING['loggers']['apps']['propagate'] = True
