import pytest

from recipebox import create_app
from recipebox import store


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'WTF_CSRF_ENABLED': False,
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


class AuthActions:
    def __init__(self, client):
        self._client = client

    def register(self, name='Alice', email='alice@example.com', password='pw1'):
        return self._client.post('/register', data={'name': name, 'email': email, 'password': password})

    def login(self, email='alice@example.com', password='pw1'):
        return self._client.post('/login', data={'email': email, 'password': password})

    def logout(self):
        return self._client.post('/logout')


@pytest.fixture
def auth(client):
    return AuthActions(client)


@pytest.fixture
def users(app):
    """Two registered users, returned as {'alice': id, 'bob': id}."""
    with app.app_context():
        alice = store.create_user('Alice', 'alice@example.com', 'pw1')
        bob = store.create_user('Bob', 'bob@example.com', 'pw2')
        return {'alice': alice.id, 'bob': bob.id}


@pytest.fixture
def make_recipe(app):
    def _make(owner_id, title='Pancakes', **fields):
        with app.app_context():
            owner = store.get_user(owner_id)
            return store.create_recipe(owner, title=title, **fields).id
    return _make
