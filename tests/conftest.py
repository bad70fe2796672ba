import os
import shutil
import tempfile

import pytest
from flask import Flask

from mailforge import Mailforge


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="mailforge-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every Mailforge module registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["BUILDER_DB"] = os.path.join(tmp_db_dir, "builder.db")
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    app.config["RECORD_STORE"] = "sqlite"
    mailforge = Mailforge(app)
    yield app
    mailforge.close()


@pytest.fixture
def app_ctx(app):
    """Application context, for code that reads config outside a request."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in_client(client, user_id="user-1", email="user1@example.com"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["user_email"] = email
        sess["user_name"] = "Test User"
    return client


@pytest.fixture
def sign_in():
    """sign_in(client, user_id, email): put a user in the client's session."""
    return sign_in_client


@pytest.fixture
def auth_client(client):
    """Test client with a signed-in user (user-1)."""
    return sign_in_client(client)
