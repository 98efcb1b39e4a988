import os

from dotenv import load_dotenv

"""
all the settings for flask stored in one place such as secret key,
upload limits, allowed email domain and where the database lives

"""

load_dotenv()


class Config:

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-later')

    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DATABASE_PATH = os.path.join(BASE_DIR, 'database', 'aep_blueprint.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f'sqlite:///{DATABASE_PATH}')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # upload settings

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', 'upload')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB Max
    ALLOWED_FILE_TYPES = ['xlsx']

    # only employees with this email domain get past the login page
    ALLOWED_EMAIL_DOMAIN = os.environ.get('ALLOWED_EMAIL_DOMAIN', 'carbonrobotics.com')

    DOCUMENT_TITLE = os.environ.get('DOCUMENT_TITLE', 'AEP Blueprint')
    HISTORY_LIMIT = 10

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'DEBUG'
