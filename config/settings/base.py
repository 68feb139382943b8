"""
Base settings for Air Quality Health Advisory project.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-development-key-change-me')

DEBUG = os.environ.get('DJANGO_DEBUG', 'False').lower() == 'true'

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.adapters',
    'apps.location',
    'apps.stations',
    'apps.gateway',
    'apps.advisory',
    'apps.api',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DJANGO_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': '100/hour',
    },
    'EXCEPTION_HANDLER': 'apps.api.exceptions.custom_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('CORS_ALLOWED_ORIGINS', '').split(',')
    if origin.strip()
]

# External API keys
API_KEYS = {
    'GEMINI': os.environ.get('GEMINI_API_KEY', ''),
    'OPENAQ': os.environ.get('OPENAQ_API_KEY', ''),
}

# Air quality service configuration
AIR_QUALITY_SETTINGS = {
    # Read-through reading cache
    'CACHE_TTL_SECONDS': 30 * 60,
    'CACHE_KEY_PRECISION': 4,

    # HTTP behaviour shared by all adapters
    'REQUEST_TIMEOUT': 10,
    'MAX_RETRIES': 3,
    'RETRY_BACKOFF_FACTOR': 2,

    # Declared service area (coordinates outside get a warning)
    'SERVICE_REGION': {
        'name': 'Delhi-NCR',
        'north': 29.0,
        'south': 28.4,
        'east': 77.5,
        'west': 76.8,
    },

    # Coverage of the live governmental feed
    'LIVE_FEED_REGION': {
        'name': 'India',
        'north': 38.0,
        'south': 6.0,
        'east': 98.0,
        'west': 68.0,
    },

    # Station selection
    'SEARCH_RADII_KM': [10, 25, 50, 100],
    'NEARBY_MAX_RADIUS_KM': 200,
    'NEARBY_DEFAULT_LIMIT': 50,

    # Curated station dataset
    'CURATED_STATIONS_PATH': os.environ.get(
        'CURATED_STATIONS_PATH',
        str(BASE_DIR / 'apps' / 'adapters' / 'data' / 'selected_stations.json'),
    ),
    'CURATED_STATIONS_URL': os.environ.get('CURATED_STATIONS_URL', ''),

    # CPCB live feed
    'CPCB_FEED_URL': 'https://airquality.cpcb.gov.in/caaqms/rss_feed',
    'CPCB_FEED_FALLBACK_PATH': os.environ.get('CPCB_FEED_FALLBACK_PATH', ''),

    # Secondary public API
    'OPENAQ_ENABLED': os.environ.get('OPENAQ_ENABLED', 'True').lower() == 'true',
    'OPENAQ_API_URL': 'https://api.openaq.org/v2/',
    'OPENAQ_RADIUS_M': 25000,

    # Narrative insight
    'INSIGHT_ENABLED': os.environ.get('INSIGHT_ENABLED', 'True').lower() == 'true',
    'GEMINI_API_URL': (
        'https://generativelanguage.googleapis.com/v1beta/models/'
        'gemini-1.5-flash:generateContent'
    ),
    'INSIGHT_TIMEOUT': 15,

    # Geocoding
    'LOCATION_CACHE_TTL': 86400,
    'GEOCODER_USER_AGENT': 'air-health-advisory/1.0',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}
