import os

# Must be set before app.py is imported: no gevent monkey-patching under pytest
os.environ['SOCKETIO_ASYNC_MODE'] = 'threading'
os.environ.setdefault('AI_RANDOM_SEED', '1234')

import pytest


@pytest.fixture
def flask_app():
    from app import app
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def socket_client(flask_app):
    from app import socketio
    c = socketio.test_client(flask_app)
    yield c
    if c.is_connected():
        c.disconnect()
