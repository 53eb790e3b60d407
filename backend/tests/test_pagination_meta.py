import pytest
from sekreterlik.config.pagination import normalize_pagination, DEFAULT_LIMIT, MAX_LIMIT
from test_utils_seed import ensure_user, auth_headers


def test_normalize_pagination_bounds():
    assert normalize_pagination(None, None) == (DEFAULT_LIMIT, 0)
    assert normalize_pagination('0', '-5') == (1, 0)
    assert normalize_pagination('1000', '3') == (MAX_LIMIT, 3)
    with pytest.raises(ValueError):
        normalize_pagination('ten', None)


def test_audit_logs_paginated_and_filtered(client):
    ensure_user('pm_admin', role='admin')
    headers = auth_headers(client, 'pm_admin')
    for i in range(3):
        client.post('/permissions/PM%20Pos', json={'permissions': ['add_member'] if i % 2 else []}, headers=headers)

    resp = client.get('/audit/logs?action=POSITION.PERM.REPLACE&entity_id=PM%20Pos&limit=2', headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['pagination'] == {'total': 3, 'limit': 2, 'offset': 0, 'returned': 2}
    ids = [row['id'] for row in body['data']]
    assert ids == sorted(ids, reverse=True)
    assert all(row['entity_id'] == 'PM Pos' for row in body['data'])

    second = client.get('/audit/logs?action=POSITION.PERM.REPLACE&entity_id=PM%20Pos&limit=2&offset=2', headers=headers)
    assert second.get_json()['pagination']['returned'] == 1


def test_audit_logs_reject_bad_limit(client):
    ensure_user('pm_admin2', role='admin')
    headers = auth_headers(client, 'pm_admin2')
    resp = client.get('/audit/logs?limit=abc', headers=headers)
    assert resp.status_code == 400


def test_audit_logs_admin_only(client):
    ensure_user('pm_member')
    resp = client.get('/audit/logs', headers=auth_headers(client, 'pm_member'))
    assert resp.status_code == 403
