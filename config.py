import os
from cachelib import FileSystemCache, SimpleCache
from dotenv import load_dotenv, find_dotenv
basedir = os.path.abspath(os.path.dirname(__file__))

ENV_FILE = find_dotenv()
if ENV_FILE:
    load_dotenv(ENV_FILE)

class Config:
    SECRET_KEY = os.getenv('APP_SECRET_KEY', 'dev-secret-change-me')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
                              'sqlite:///' + os.path.join(basedir, 'app.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server-side sessies voor het lopende trainingslog
    SESSION_TYPE = 'cachelib'
    SESSION_PERMANENT = False
    SESSION_CACHELIB = FileSystemCache(
        cache_dir=os.getenv('SESSION_FILE_DIR', '/tmp/gymlog_session'),
        threshold=500,
    )

    JWT_EXPIRES_SECONDS = int(os.getenv('JWT_EXPIRES_SECONDS', 60 * 60 * 24))
    ADMIN_USERNAMES = [name.strip() for name in os.getenv('ADMIN_USERNAMES', '').split(',') if name.strip()]

    APP_TIMEZONE = os.getenv('APP_TIMEZONE', 'Europe/Madrid')
    EXERCISES_PER_PAGE = 20
    WORKOUTS_PER_PAGE = 10

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SESSION_CACHELIB = SimpleCache()
    ADMIN_USERNAMES = ['admin']
    APP_TIMEZONE = 'UTC'
    LOG_LEVEL = 'DEBUG'
