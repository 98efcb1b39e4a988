import pytest

from app import create_app
from config import TestConfig
from database import db
from services.outline_store import get_store


@pytest.fixture
def app(tmp_path):
    """App on an in-memory database, with its app context pushed."""

    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / 'upload')

    app = create_app(Config)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def store(app):
    return get_store()


@pytest.fixture
def client(app):
    """Test client that is already signed in with an allowed email."""
    client = app.test_client()
    with client.session_transaction() as session:
        session['user_email'] = 'tester@carbonrobotics.com'
    return client


@pytest.fixture
def anonymous_client(app):
    return app.test_client()


@pytest.fixture
def file_app(tmp_path):
    """App on a SQLite file, so worker threads see what the test thread commits."""

    class Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'outline.db'}"
        UPLOAD_FOLDER = str(tmp_path / 'upload')

    app = create_app(Config)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_store(file_app):
    return get_store()
