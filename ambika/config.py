import os


def _csv(value: str) -> tuple:
    return tuple(s.strip() for s in value.split(',') if s.strip())


class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///ambika.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Signed login tokens expire after this many seconds (one day)
    TOKEN_MAX_AGE = int(os.getenv('TOKEN_MAX_AGE', '86400'))
    ADMIN_SECRET = os.getenv('ADMIN_SECRET')

    DEFAULT_ADMIN_USERNAME = os.getenv('DEFAULT_ADMIN_USERNAME', 'admin')
    DEFAULT_ADMIN_PASSWORD = os.getenv('DEFAULT_ADMIN_PASSWORD', 'admin123')
    DEFAULT_ADMIN_EMAIL = os.getenv('DEFAULT_ADMIN_EMAIL', 'admin@ambika.com')

    # Statuses the order list passes through untouched; anything else is shown as Pending
    ORDER_LIST_STATUSES = _csv(os.getenv('ORDER_LIST_STATUSES', 'Pending,Generate Estimate'))

    LOG_LEVEL = os.getenv('LOG_LEVEL')


class DevConfig(BaseConfig):
    DEBUG = True
    ENV = 'development'


class ProdConfig(BaseConfig):
    DEBUG = False
    ENV = 'production'


class TestConfig(BaseConfig):
    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret'
