import json

import pytest

from publicdrive.errors import AlreadyExists
from publicdrive.ledger import VirtualFolderLedger


def test_missing_document_reads_as_empty(ledger):
    assert ledger.list() == {}
    assert not ledger.document.path.exists()


def test_create_persists_entry(ledger):
    entry = ledger.create('docs/notes', 'notes')

    assert entry['type'] == 'folder'
    assert entry['createdAt'].endswith('Z')
    stored = json.loads(ledger.document.path.read_text())
    assert stored == {'docs/notes': entry}


def test_create_rejects_duplicate(ledger):
    ledger.create('docs', 'docs')
    with pytest.raises(AlreadyExists):
        ledger.create('docs', 'docs')


def test_delete_cascades_to_descendants_only(ledger):
    for path in ['a', 'a/b', 'a/b/c', 'a/bc', 'x']:
        ledger.create(path, path.rsplit('/', 1)[-1])

    removed = ledger.delete('a/b')

    assert sorted(removed) == ['a/b', 'a/b/c']
    assert sorted(ledger.list()) == ['a', 'a/bc', 'x']


def test_delete_unknown_path_does_not_write(ledger):
    assert ledger.delete('nope') == []
    assert not ledger.document.path.exists()


def test_children_of(ledger):
    for path in ['a', 'a/b', 'a/c', 'a/b/d']:
        ledger.create(path, path.rsplit('/', 1)[-1])
    assert sorted(e['path'] for e in ledger.children_of('a')) == ['a/b', 'a/c']
    assert [e['path'] for e in ledger.children_of('')] == ['a']


def test_has_prefix(ledger):
    ledger.create('a/b/c', 'c')
    assert ledger.has_prefix('a/b')
    assert not ledger.has_prefix('a/bc')


def test_corrupt_document_reads_as_empty(tmp_path):
    path = tmp_path / 'virtual-folders.json'
    path.write_text('{not json')
    assert VirtualFolderLedger(path).list() == {}


def test_instances_share_the_document(tmp_path):
    path = tmp_path / 'virtual-folders.json'
    VirtualFolderLedger(path).create('one', 'one')
    VirtualFolderLedger(path).create('two', 'two')
    assert sorted(VirtualFolderLedger(path).list()) == ['one', 'two']
