"""
Test settings for Air Quality Health Advisory project.
"""
from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# No rate limiting in tests
REST_FRAMEWORK = REST_FRAMEWORK.copy()
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {}

# Keys are blank so nothing reaches the network by accident
API_KEYS = {
    'GEMINI': '',
    'OPENAQ': '',
}

AIR_QUALITY_SETTINGS = AIR_QUALITY_SETTINGS.copy()
AIR_QUALITY_SETTINGS['MAX_RETRIES'] = 0
AIR_QUALITY_SETTINGS['CURATED_STATIONS_URL'] = ''
AIR_QUALITY_SETTINGS['CPCB_FEED_FALLBACK_PATH'] = ''

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
