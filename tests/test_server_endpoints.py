"""Tests for the upload server API endpoints."""

import pytest

from server.passwords import verify_password
from server.repositories import UploadRepository


def prepare(client, **overrides):
    body = {'password': None, 'time': 1, 'unit': 'days', 'filename': 'notes.txt'}
    body.update(overrides)
    return client.post('/prepare', json=body)


def append(client, uuid, data):
    return client.post(f'/append/{uuid}', files={'chunk': ('blob', data, 'application/octet-stream')})


def test_root_endpoint(server_api):
    """Test health check endpoint."""
    response = server_api.get('/')
    assert response.status_code == 200
    assert response.json() == {'status': 'running', 'service': 'chunkpost'}


def test_request_id_is_echoed(server_api):
    response = server_api.get('/', headers={'X-Request-ID': 'req-42'})
    assert response.headers['X-Request-ID'] == 'req-42'


class TestPrepare:
    def test_prepare_returns_uuid(self, server_api):
        response = prepare(server_api)

        assert response.status_code == 201
        uuid = response.json()['uuid']
        upload = UploadRepository.get_by_uuid(uuid)
        assert upload.filename == 'notes.txt'
        assert upload.size == 0
        assert not upload.done
        assert upload.password_hash is None

    def test_prepare_hashes_password(self, server_api):
        response = prepare(server_api, password='s3cret')

        upload = UploadRepository.get_by_uuid(response.json()['uuid'])
        assert upload.password_hash != 's3cret'
        assert verify_password('s3cret', upload.password_hash)

    def test_prepare_sets_expiry(self, server_api):
        response = prepare(server_api, time=2, unit='hours')

        upload = UploadRepository.get_by_uuid(response.json()['uuid'])
        assert (upload.expiry - upload.created_at).total_seconds() == 2 * 3600

    def test_unknown_unit(self, server_api):
        response = prepare(server_api, unit='weeks')

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_UNIT'

    @pytest.mark.parametrize("time,unit", [(366, 'days'), (10 ** 12, 'days'), (366 * 24, 'hours')])
    def test_expiry_too_long(self, server_api, time, unit):
        response = prepare(server_api, time=time, unit=unit)

        assert response.status_code == 400
        assert response.json()['code'] == 'EXPIRY_TOO_LONG'

    def test_one_year_is_accepted(self, server_api):
        assert prepare(server_api, time=365, unit='days').status_code == 201

    @pytest.mark.parametrize("time", [0, -3])
    def test_non_positive_time(self, server_api, time):
        response = prepare(server_api, time=time)

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_UNIT'
        assert response.json()['detail'] == 'Duration must be positive'

    @pytest.mark.parametrize("body", [
        {'time': 1, 'unit': 'days'},
        {'time': 1, 'unit': 'days', 'filename': ''},
        {'time': 'soon', 'unit': 'days', 'filename': 'a'},
    ])
    def test_malformed_body(self, server_api, body):
        response = server_api.post('/prepare', json=body)
        assert response.status_code == 422


class TestAppendAndFinish:
    def test_full_session(self, server_api, server_env):
        uuid = prepare(server_api).json()['uuid']

        first = append(server_api, uuid, b'a' * 1024)
        second = append(server_api, uuid, b'b' * 10)
        finish = server_api.post(f'/finish/{uuid}', json={})

        assert first.status_code == 200
        assert first.json() == {'size': 1024}
        assert second.json() == {'size': 1034}
        assert finish.status_code == 200
        assert finish.json() == {}
        assert (server_env / uuid).read_bytes() == b'a' * 1024 + b'b' * 10

        upload = UploadRepository.get_by_uuid(uuid)
        assert upload.done
        assert upload.size == 1034

    def test_empty_session_creates_empty_file(self, server_api, server_env):
        uuid = prepare(server_api).json()['uuid']

        response = server_api.post(f'/finish/{uuid}', json={})

        assert response.status_code == 200
        assert (server_env / uuid).read_bytes() == b''

    def test_chunk_too_large(self, server_api, server_env):
        uuid = prepare(server_api).json()['uuid']

        response = append(server_api, uuid, b'x' * 1025)

        assert response.status_code == 400
        assert response.json()['code'] == 'CHUNK_TOO_LARGE'
        assert not (server_env / uuid).exists()

    def test_append_unknown_upload(self, server_api):
        response = append(server_api, 'no-such-upload', b'x')

        assert response.status_code == 404
        assert response.json()['code'] == 'UPLOAD_NOT_FOUND'

    def test_finish_unknown_upload(self, server_api):
        response = server_api.post('/finish/no-such-upload', json={})

        assert response.status_code == 404
        assert response.json()['code'] == 'UPLOAD_NOT_FOUND'

    def test_finished_upload_rejects_further_exchanges(self, server_api):
        uuid = prepare(server_api).json()['uuid']
        server_api.post(f'/finish/{uuid}', json={})

        assert append(server_api, uuid, b'x').status_code == 404
        assert server_api.post(f'/finish/{uuid}', json={}).status_code == 404

    def test_append_requires_chunk_field(self, server_api):
        uuid = prepare(server_api).json()['uuid']

        response = server_api.post(f'/append/{uuid}', files={'file': ('blob', b'x')})

        assert response.status_code == 422


def upload(client, data, **overrides):
    uuid = prepare(client, **overrides).json()['uuid']
    append(client, uuid, data)
    client.post(f'/finish/{uuid}', json={})
    return uuid


class TestDownload:
    def test_download_unprotected(self, server_api):
        uuid = upload(server_api, b'hello world')

        response = server_api.get(f'/downloads/{uuid}')

        assert response.status_code == 200
        assert response.content == b'hello world'
        assert 'filename="notes.txt"' in response.headers['content-disposition']

    def test_protected_download_requires_password(self, server_api):
        uuid = upload(server_api, b'secret', password='s3cret')

        response = server_api.get(f'/downloads/{uuid}')

        assert response.status_code == 403
        assert response.json()['code'] == 'FORBIDDEN'

    def test_protected_download_with_password(self, server_api):
        uuid = upload(server_api, b'secret', password='s3cret')

        response = server_api.post(f'/downloads/{uuid}', data={'password': 's3cret'})

        assert response.status_code == 200
        assert response.content == b'secret'

    @pytest.mark.parametrize("form", [{'password': 'wrong'}, {}])
    def test_protected_download_wrong_password(self, server_api, form):
        uuid = upload(server_api, b'secret', password='s3cret')

        response = server_api.post(f'/downloads/{uuid}', data=form)

        assert response.status_code == 403
        assert response.json()['code'] == 'FORBIDDEN'

    def test_pending_upload_not_downloadable(self, server_api):
        uuid = prepare(server_api).json()['uuid']
        append(server_api, uuid, b'partial')

        assert server_api.get(f'/downloads/{uuid}').status_code == 404

    def test_unknown_upload(self, server_api):
        response = server_api.get('/downloads/no-such-upload')

        assert response.status_code == 404
        assert response.json()['code'] == 'UPLOAD_NOT_FOUND'
