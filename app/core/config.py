import os
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class Environment(str, Enum):
    TEST = 'test'
    PRODUCTION = 'production'
    DEVELOP = 'develop'


class Settings:
    ENVIRONMENT: Environment = Environment(os.getenv('ENVIRONMENT') or Environment.TEST)
    DB_USERNAME: str = os.getenv('DB_USERNAME')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD')
    DB_HOST: str = os.getenv('DB_HOST')
    DB_PORT: str = os.getenv('DB_PORT')
    DB_NAME: str = os.getenv('DB_NAME')

    SQLALCHEMY_TEST_DATABASE_URL = 'sqlite:///:memory:'
    DATABASE_URL: str = (
        f'postgresql://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}'
        if ENVIRONMENT != Environment.TEST
        else SQLALCHEMY_TEST_DATABASE_URL
    )

    SECRET_KEY: str = os.getenv('SECRET_KEY', 'test-secret-key')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', '720'))

    PRIVILEGED_CLUB: str = os.getenv('PRIVILEGED_CLUB', 'SOSC')
    STATS_BATCH_SIZE: int = int(os.getenv('STATS_BATCH_SIZE', '30'))
    TIMEZONE: str = os.getenv('TIMEZONE', 'Asia/Kolkata')

    KIOSK_API_URL: str = os.getenv('KIOSK_API_URL', 'http://localhost:8000')
    KIOSK_STORAGE_PATH: str = os.getenv('KIOSK_STORAGE_PATH', '.kiosk_storage.json')


settings = Settings()
