import pytest

from publicdrive import create_app
from publicdrive.access_log import AccessLog
from publicdrive.ledger import VirtualFolderLedger
from publicdrive.manager import DriveManager


@pytest.fixture
def storage(tmp_path):
    root = tmp_path / 'public'
    root.mkdir()
    return root


@pytest.fixture
def ledger(tmp_path):
    return VirtualFolderLedger(tmp_path / 'virtual-folders.json')


@pytest.fixture
def access_log(tmp_path):
    return AccessLog(tmp_path / 'access-log.json')


@pytest.fixture
def manager(storage, ledger, access_log):
    return DriveManager(storage, ledger, access_log)


@pytest.fixture
def app(tmp_path, storage):
    app = create_app({
        'TESTING': True,
        'STORAGE_ROOT': str(storage),
        'VIRTUAL_FOLDERS_FILE': str(tmp_path / 'virtual-folders.json'),
        'ACCESS_LOG_FILE': str(tmp_path / 'access-log.json'),
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()
