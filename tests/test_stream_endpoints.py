"""Tests for the gateway API endpoints."""

import pytest

import gateway.routes.stream_routes as stream_routes
import gateway.services.stream_service as stream_service
from tests.conftest import CHUNK_0, CHUNK_1

WHOLE = CHUNK_0 + CHUNK_1


def test_health_endpoint(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_full_download(client, store):
    response = client.get('/stream/a.mp4')

    assert response.status_code == 200
    assert response.content == WHOLE
    assert response.headers['content-length'] == '300'
    assert response.headers['content-type'] == 'application/octet-stream'
    assert response.headers['content-disposition'] == 'attachment; filename="a.mp4"'
    assert all('range' not in r.headers for r in store.chunk_requests)


def test_stream_route_ignores_range_header(client):
    response = client.get('/stream/a.mp4', headers={'Range': 'bytes=0-9'})

    assert response.status_code == 200
    assert response.content == WHOLE


def test_range_route_without_header_serves_whole_file(client):
    response = client.get('/range/a.mp4')

    assert response.status_code == 200
    assert response.content == WHOLE
    assert response.headers['content-length'] == '300'


def test_range_across_chunks(client, store):
    response = client.get('/range/a.mp4', headers={'Range': 'bytes=50-150'})

    assert response.status_code == 206
    assert response.content == WHOLE[50:151]
    assert response.headers['content-range'] == 'bytes 50-150/300'
    assert response.headers['content-length'] == '101'
    assert response.headers['accept-ranges'] == 'bytes'
    assert [(r.url.path, r.headers['range']) for r in store.chunk_requests] == [
        ('/c0', 'bytes=50-'),
        ('/c1', 'bytes=0-50'),
    ]


def test_range_inside_last_chunk(client, store):
    response = client.get('/range/a.mp4', headers={'Range': 'bytes=250-299'})

    assert response.status_code == 206
    assert response.content == CHUNK_1[150:200]
    assert response.headers['content-range'] == 'bytes 250-299/300'
    assert [(r.url.path, r.headers['range']) for r in store.chunk_requests] == [
        ('/c1', 'bytes=150-199'),
    ]


def test_open_ended_range(client):
    response = client.get('/range/a.mp4', headers={'Range': 'bytes=280-'})

    assert response.status_code == 206
    assert response.content == WHOLE[280:]
    assert response.headers['content-range'] == 'bytes 280-299/300'


def test_range_with_store_ignoring_sub_ranges(client, store):
    store.ignore_range = True

    response = client.get('/range/a.mp4', headers={'Range': 'bytes=90-109'})

    assert response.status_code == 206
    assert response.content == WHOLE[90:110]


@pytest.mark.parametrize('header', ['bytes=200-100', 'bytes=0-300', 'bytes=300-', 'bytes=0-' + '9' * 5000])
def test_unsatisfiable_range(client, store, header):
    response = client.get('/range/a.mp4', headers={'Range': header})

    assert response.status_code == 416
    assert response.headers['content-range'] == 'bytes */300'
    assert store.chunk_requests == []


@pytest.mark.parametrize('path', ['/stream/missing.mp4', '/range/missing.mp4'])
def test_unknown_file(client, path):
    response = client.get(path)

    assert response.status_code == 404
    assert response.json() == {'error': '404 not found'}


@pytest.mark.parametrize('path', ['/stream/', '/range/'])
def test_missing_file_name(client, store, path):
    response = client.get(path)

    assert response.status_code == 400
    assert store.requests == []


def test_only_first_path_segment_is_the_file_name(client):
    response = client.get('/stream/a.mp4/extra')

    assert response.status_code == 200
    assert response.content == WHOLE


def test_manifest_unavailable(client, store):
    store.manifest_status = 500

    response = client.get('/stream/a.mp4')

    assert response.status_code == 500
    assert response.text.startswith('Server Error')


def test_manifest_invalid_json(client, store):
    store.manifest_body = b'<html>oops</html>'

    response = client.get('/range/a.mp4', headers={'Range': 'bytes=0-1'})

    assert response.status_code == 500


def test_manifest_entry_corrupt(client, store):
    store.manifest = {'files': {'a.mp4': {'chunks': ['c0', 'c1'], 'metadata': {'size': 300, 'chunksSize': [100]}}}}

    response = client.get('/stream/a.mp4')

    assert response.status_code == 500
    assert store.chunk_requests == []


def test_chunk_failure_aborts_range_response(client, store):
    store.failing.add('/c1')

    with pytest.raises(Exception):
        client.get('/range/a.mp4', headers={'Range': 'bytes=0-299'})


def test_unexpected_error_becomes_plain_500(client, store, monkeypatch):
    def broken_resolver(interval, chunk_sizes):
        raise ValueError('kaboom')

    monkeypatch.setattr(stream_service, 'resolve_chunk_window', broken_resolver)

    response = client.get('/range/a.mp4', headers={'Range': 'bytes=0-9'})

    assert response.status_code == 500
    assert response.text == 'Server Error: kaboom'
    assert store.chunk_requests == []


def test_request_id_header(client):
    response = client.get('/stream/missing.mp4')

    assert response.headers.get('x-request-id')


def test_configured_upstream_origin(client, store, monkeypatch):
    monkeypatch.setattr(stream_routes, 'UPSTREAM_ORIGIN', 'http://origin.test/')

    response = client.get('/stream/a.mp4')

    assert response.status_code == 200
    assert {r.url.host for r in store.requests} == {'origin.test'}
