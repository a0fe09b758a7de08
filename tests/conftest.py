import pytest

from floraerp import create_app
from floraerp.config import TestConfig
from floraerp.extensions import db
from floraerp.models import seed_catalog


@pytest.fixture()
def app(tmp_path):
    class FileDbConfig(TestConfig):
        # File backed so resolver worker threads share the seeded data.
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'flora-test.db'}"

    app = create_app(FileDbConfig)
    with app.app_context():
        seed_catalog()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()
