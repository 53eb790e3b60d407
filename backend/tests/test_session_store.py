import json
from sekreterlik.client.session_store import (
    JsonFileStorage, MemoryStorage, SessionStore, USER_KEY, LOGGED_IN_KEY,
)


def test_save_read_purge_memory():
    store = SessionStore(MemoryStorage())
    assert store.read() == (None, None)
    store.save({'id': 1, 'role': 'member', 'name': 'Ayşe'})
    raw_user, flag = store.read()
    assert json.loads(raw_user) == {'id': 1, 'role': 'member', 'name': 'Ayşe'}
    assert flag == 'true'
    store.purge()
    assert store.read() == (None, None)


def test_json_file_storage_persists_across_instances(tmp_path):
    path = tmp_path / 'nested' / 'session.json'
    SessionStore(JsonFileStorage(path)).save({'id': 2, 'role': 'admin'})
    assert path.exists()
    again = SessionStore(JsonFileStorage(path))
    raw_user, flag = again.read()
    assert json.loads(raw_user)['role'] == 'admin'
    assert flag == 'true'
    again.purge()
    assert json.loads(path.read_text(encoding='utf-8')) == {}


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / 'session.json'
    path.write_text('{not json', encoding='utf-8')
    storage = JsonFileStorage(path)
    assert storage.get_item(USER_KEY) is None
    storage.set_item(LOGGED_IN_KEY, 'true')
    assert storage.get_item(LOGGED_IN_KEY) == 'true'


def test_remove_missing_key_is_noop(tmp_path):
    storage = JsonFileStorage(tmp_path / 'none.json')
    storage.remove_item(USER_KEY)
    assert not (tmp_path / 'none.json').exists()


def test_token_is_stored_and_purged_with_the_session():
    store = SessionStore(MemoryStorage())
    store.save({'id': 3, 'role': 'member'}, 'jwt-abc')
    assert store.read_token() == 'jwt-abc'
    # a save without token must not leave an older one behind
    store.save({'id': 4, 'role': 'member'})
    assert store.read_token() is None
    store.save({'id': 3, 'role': 'member'}, 'jwt-abc')
    store.purge()
    assert store.read_token() is None
    assert store.read() == (None, None)
