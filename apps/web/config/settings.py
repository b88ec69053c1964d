"""
Django settings for Souq Orders.

Secrets come from the environment - never hardcode credentials.
Run with: uv run python manage.py runserver
"""

from pathlib import Path

import environ  # type: ignore[import-untyped]

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Initialize environ
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, []),
    STRIPE_SECRET_KEY=(str, ""),
    STRIPE_WEBHOOK_SECRET=(str, ""),
    PAYMENT_CURRENCY=(str, "sar"),
    SITE_URL=(str, ""),
)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "apps.web.core",
    "apps.web.restaurant",
    "apps.web.payments",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "apps.web.core.middleware.ClientMiddleware",
    "apps.web.core.middleware.RouteRoleMiddleware",
]

ROOT_URLCONF = "apps.web.config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "apps.web.config.wsgi.application"

# Database
# https://docs.djangoproject.com/en/5.1/ref/settings/#databases
# Connection string from the environment: DATABASE_URL
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

# Custom user model
AUTH_USER_MODEL = "core.User"

LOGIN_URL = "/admin/login/"

# Password validation
_V = "django.contrib.auth.password_validation"
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": f"{_V}.UserAttributeSimilarityValidator"},
    {"NAME": f"{_V}.MinimumLengthValidator"},
    {"NAME": f"{_V}.CommonPasswordValidator"},
    {"NAME": f"{_V}.NumericPasswordValidator"},
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR.parent.parent / "staticfiles"  # /app/staticfiles in production

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Payments (Stripe)
# Blank keys leave the processor unconfigured; checkout answers 500.
STRIPE_SECRET_KEY = env("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = env("STRIPE_WEBHOOK_SECRET")
PAYMENT_CURRENCY = env("PAYMENT_CURRENCY")

# Fallback origin for checkout redirects when the request has no Origin header
SITE_URL = env("SITE_URL")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "apps.web": {"handlers": ["console"], "level": "INFO"},
    },
}
