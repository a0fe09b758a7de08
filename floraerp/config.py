import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / '.env', override=False)

LOCAL_ENV = BASE_DIR / '.env.local'
if LOCAL_ENV.exists():
    load_dotenv(LOCAL_ENV, override=True)


class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f"sqlite:///{BASE_DIR / 'flora.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    APP_VERSION = os.getenv('APP_VERSION', '1.0.0')
    PRODUCT_NAME = os.getenv('PRODUCT_NAME', 'Flora ERP')

    LABEL_SHEET_NAME = os.getenv('LABEL_SHEET_NAME', 'Formtec 3108')
    LABEL_RESOLVE_WORKERS = int(os.getenv('LABEL_RESOLVE_WORKERS', '4'))


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG').upper()


class ProdConfig(BaseConfig):
    DEBUG = False


class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'WARNING'


Config = DevConfig if os.getenv('FLASK_ENV') != 'production' else ProdConfig
