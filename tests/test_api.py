import io
import json


def upload(client, name, content=b'hello', path=''):
    return client.post('/api/upload', data={'file': (io.BytesIO(content), name), 'path': path},
                       content_type='multipart/form-data')


def test_index_serves_page(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Public Files' in response.data


def test_round_trip_over_http(client):
    response = client.post('/api/folders', json={'name': 'notes', 'parentPath': ''})
    assert response.status_code == 200
    assert response.get_json()['path'] == 'notes'

    response = upload(client, 'a.txt', path='notes')
    data = response.get_json()
    assert data['success'] is True
    assert data['fileName'] == 'a.txt'
    assert data['path'] == 'notes'

    tree = client.get('/api/public-folders').get_json()
    notes = tree['children'][0]
    assert notes['children'][0] == {'id': 'notes/a.txt', 'name': 'a.txt', 'type': 'file',
                                    'path': 'notes/a.txt', 'size': 5}

    response = client.delete('/api/delete-file?path=notes/a.txt')
    assert response.status_code == 200
    tree = client.get('/api/public-folders').get_json()
    assert tree['children'][0]['children'] == []


def test_sort_order(client, storage):
    for name in ['zeta', 'alpha']:
        (storage / name).mkdir()
    for name in ['b.txt', 'a.txt']:
        (storage / name).write_text(name)

    tree = client.get('/api/public-folders').get_json()
    assert [c['name'] for c in tree['children']] == ['alpha', 'zeta', 'a.txt', 'b.txt']


def test_public_files_flat(client, storage):
    (storage / 'docs').mkdir()
    (storage / 'docs' / 'a.txt').write_text('a')
    data = client.get('/api/public-files?flat=true').get_json()
    assert data['type'] == 'flat'
    assert [f['path'] for f in data['data']] == ['docs/a.txt']

    data = client.get('/api/public-files').get_json()
    assert data['type'] == 'hierarchical'
    assert data['data'][0]['name'] == 'docs'


def test_create_folder_failures(client):
    assert client.post('/api/folders', json={}).status_code == 400
    assert client.post('/api/folders', data='nope').status_code == 400
    assert client.post('/api/folders', json={'name': '???'}).status_code == 400

    client.post('/api/folders', json={'name': 'docs'})
    response = client.post('/api/folders', json={'name': 'docs'})
    assert response.status_code == 409
    assert response.get_json() == {'success': False, 'message': 'Folder already exists',
                                   'error': 'AlreadyExists'}

    response = client.post('/api/folders', json={'name': 'x', 'parentPath': '../..'})
    assert response.status_code == 403
    assert response.get_json()['error'] == 'PathEscape'


def test_upload_failures(client):
    response = client.post('/api/upload', data={}, content_type='multipart/form-data')
    assert response.status_code == 400
    assert upload(client, 'a.txt', path='../escape').status_code == 403


def test_upload_too_large(app, client):
    app.config['MAX_CONTENT_LENGTH'] = 10
    response = upload(client, 'big.bin', b'x' * 1000)
    assert response.status_code == 413
    assert response.get_json()['success'] is False


def test_delete_file_failures(client):
    assert client.delete('/api/delete-file').status_code == 400
    assert client.delete('/api/delete-file?path=missing.txt').status_code == 404
    assert client.delete('/api/delete-file?path=../x').status_code == 403


def test_delete_folder(client, storage):
    (storage / 'a' / 'b').mkdir(parents=True)
    (storage / 'a' / 'b' / 'f.txt').write_text('x')

    response = client.delete('/api/delete-folder?path=a/b')
    assert response.status_code == 200
    assert response.get_json()['success'] is True
    assert not (storage / 'a' / 'b').exists()

    assert client.delete('/api/delete-folder?path=a/b').status_code == 404
    assert client.delete('/api/delete-folder').status_code == 400


def test_delete_root_is_forbidden(client, storage):
    for path in ['', '/', '.']:
        response = client.delete(f'/api/delete-folder?path={path}')
        assert response.status_code == 403
        assert response.get_json()['error'] == 'ForbiddenOperation'
    assert storage.is_dir()


def test_remove_all(client, storage):
    (storage / 'docs').mkdir()
    (storage / 'a.txt').write_text('x')
    client.post('/api/track-access', json={'filePath': 'a.txt', 'fileName': 'a.txt', 'size': 1})

    response = client.delete('/api/remove-all')
    assert response.status_code == 200
    assert list(storage.iterdir()) == []
    assert client.get('/api/track-access').get_json() == []


def test_remove_all_missing_root(client, storage):
    storage.rmdir()
    assert client.delete('/api/remove-all').status_code == 404


def test_track_access(client, tmp_path):
    assert client.post('/api/track-access', json={'filePath': 'a.txt'}).status_code == 400

    for name in ['a.txt', 'b.txt', 'a.txt']:
        response = client.post('/api/track-access', json={'filePath': name, 'fileName': name, 'size': 1})
        assert response.get_json() == {'success': True, 'recorded': True}

    entries = client.get('/api/track-access').get_json()
    assert [e['filePath'] for e in entries] == ['a.txt', 'b.txt']
    stored = json.loads((tmp_path / 'access-log.json').read_text())
    assert stored == entries


def test_recent_files(client, storage):
    assert client.get('/api/recent-files').get_json() == []

    (storage / 'a.txt').write_text('abc')
    recent = client.get('/api/recent-files').get_json()
    assert recent[0]['path'] == 'a.txt'
    assert recent[0]['sizeLabel'] == '3.00 Bytes'


def test_download_records_access(client, storage):
    (storage / 'docs').mkdir()
    (storage / 'docs' / 'a.txt').write_text('abc')

    response = client.get('/api/download?path=docs/a.txt')
    assert response.status_code == 200
    assert response.data == b'abc'
    response.close()

    recent = client.get('/api/recent-files').get_json()
    assert recent[0]['accessedAt']
    assert recent[0]['path'] == 'docs/a.txt'

    assert client.get('/api/download?path=docs').status_code == 404


def test_track_access_rejects_non_string_fields(client):
    response = client.post('/api/track-access', json={'filePath': 123, 'fileName': 'x'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'InvalidInput'

    response = client.post('/api/track-access', json={'filePath': 'a.txt', 'fileName': ['x']})
    assert response.status_code == 400
    assert client.get('/api/track-access').get_json() == []


def test_create_folder_rejects_non_string_parent(client):
    response = client.post('/api/folders', json={'name': 'x', 'parentPath': 5})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'InvalidInput'


def test_upload_into_file_parent(client, storage):
    (storage / 'a.txt').write_text('x')
    response = upload(client, 'b.txt', path='a.txt')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'InvalidInput'


def test_list_tree_of_file(client, storage):
    (storage / 'a.txt').write_text('x')
    response = client.get('/api/public-folders?path=a.txt')
    assert response.status_code == 400
