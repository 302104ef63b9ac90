import mongomock
import pytest
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient

import storage
from accounts.registration import issue_token, new_identity
from storage import IDENTITIES
from storage.document import DocumentStore
from storage.relational import RelationalStore

QR_TOKEN = 'qr-test-token'


def pytest_collection_modifyitems(items):
    # the relational run of a store-backed test needs the test database
    for item in items:
        callspec = getattr(item, 'callspec', None)
        if callspec is not None and callspec.params.get('store') == 'relational':
            item.add_marker(pytest.mark.django_db)


@pytest.fixture(autouse=True)
def portal_settings(settings, tmp_path):
    settings.SECURE_SSL_REDIRECT = False
    settings.QR_ATTENDANCE_TOKEN = QR_TOKEN
    settings.PORTAL_ARCHIVE_DELETES_PROJECTS = False
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.STORAGES = {
        'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
        'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
    }
    # hashing speed only matters to tests
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    return settings


def document_store():
    client = mongomock.MongoClient(tz_aware=True)
    store = DocumentStore(client['portal_test'], client=client)
    store.ensure_indexes()
    return store


@pytest.fixture(params=['relational', 'document'])
def store(request, monkeypatch):
    """Every store-backed test runs once per persistence backend."""
    if request.param == 'relational':
        instance = RelationalStore()
    else:
        instance = document_store()
    monkeypatch.setattr(storage, '_store', instance)
    yield instance
    instance.close()


def make_identity(store, username, role='student', password='secret123', **extra):
    return store.insert(IDENTITIES, new_identity(
        extra.pop('name', username.title()),
        extra.pop('email', f'{username}@example.com'),
        username,
        make_password(password),
        role=role,
        **extra,
    ))


@pytest.fixture
def admin(store):
    return make_identity(store, 'admin', role='admin', name='Portal Admin')


@pytest.fixture
def student(store):
    return make_identity(store, 'alice', name='Alice')


@pytest.fixture
def admin_caller(admin):
    return {'id': admin['id'], 'role': 'admin'}


@pytest.fixture
def student_caller(student):
    return {'id': student['id'], 'role': 'student'}


@pytest.fixture
def api_client():
    return APIClient()


def client_for(identity):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(identity)}')
    return client


@pytest.fixture
def admin_client(admin):
    return client_for(admin)


@pytest.fixture
def student_client(student):
    return client_for(student)
