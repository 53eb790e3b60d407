"""The view map, the catalog and the default presets must agree on key names."""
from sekreterlik.constants.permissions import ALL_PERMISSION_KEYS, AVAILABLE_PERMISSIONS, DEFAULT_POSITION_PERMISSIONS, unknown_permission_keys
from sekreterlik.constants.views import VIEW_PERMISSION_MAP, DASHBOARD_VIEWS, DASHBOARD_VIEW


def test_every_view_key_is_in_catalog():
    catalog = {item['key'] for item in AVAILABLE_PERMISSIONS}
    for view, keys in VIEW_PERMISSION_MAP.items():
        assert keys, view
        missing = {str(k) for k in keys} - catalog
        assert not missing, f'{view} references unknown keys {missing}'


def test_every_dashboard_view_has_a_policy():
    for view in DASHBOARD_VIEWS:
        if view == DASHBOARD_VIEW:
            continue
        assert view in VIEW_PERMISSION_MAP


def test_default_presets_use_known_keys():
    for position, keys in DEFAULT_POSITION_PERMISSIONS.items():
        assert unknown_permission_keys([str(k) for k in keys]) == [], position


def test_catalog_keys_are_unique():
    keys = [item['key'] for item in AVAILABLE_PERMISSIONS]
    assert len(keys) == len(set(keys)) == len(ALL_PERMISSION_KEYS)


def test_stk_presets_also_pass_the_stk_page_guard():
    from sekreterlik.client.guards import is_stk_manager_position
    stk_keys = {'manage_stk', 'create_event'}
    for position, keys in DEFAULT_POSITION_PERMISSIONS.items():
        if stk_keys & {str(k) for k in keys}:
            assert is_stk_manager_position(position), position
