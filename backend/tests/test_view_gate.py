import logging
from freezegun import freeze_time
from sekreterlik.client.view_gate import ViewGate, NO_PERMISSION_MESSAGE
from sekreterlik.constants.permissions import PermissionKey


def test_dashboard_always_allowed():
    gate = ViewGate([])
    assert gate.has_view_permission('dashboard')
    assert gate.set_view_with_permission('dashboard')
    assert gate.error == ''


def test_any_listed_key_opens_view():
    gate = ViewGate(['add_ballot_box'])
    assert gate.has_view_permission('ballot-boxes')
    assert not gate.has_view_permission('observers')


def test_keys_match_exactly():
    # add_stk does not imply manage_stk
    gate = ViewGate([PermissionKey.ADD_STK])
    assert not gate.has_view_permission('stk-management')


def test_unmapped_view_is_fail_open_and_logged(caplog):
    gate = ViewGate([], fail_open=True)
    with caplog.at_level(logging.WARNING, logger='sekreterlik.client.view_gate'):
        assert gate.has_view_permission('bulk-sms-page')
    assert 'bulk-sms-page' in caplog.text


def test_unmapped_view_denied_when_fail_closed():
    gate = ViewGate([], fail_open=False)
    assert not gate.set_view_with_permission('bulk-sms-page')
    assert gate.current_view == 'dashboard'


def test_denied_switch_falls_back_and_flashes_for_three_seconds():
    with freeze_time('2026-10-19 10:00:00') as frozen:
        gate = ViewGate(['add_member'])
        assert gate.set_view_with_permission('add-member')
        assert gate.current_view == 'add-member'

        assert not gate.set_view_with_permission('observers')
        assert gate.current_view == 'dashboard'
        assert gate.error == NO_PERMISSION_MESSAGE

        frozen.tick(2.9)
        assert gate.error == NO_PERMISSION_MESSAGE
        frozen.tick(0.2)
        assert gate.error == ''


def test_new_denial_restarts_the_timer():
    with freeze_time('2026-10-19 10:00:00') as frozen:
        gate = ViewGate([])
        gate.set_view_with_permission('observers')
        frozen.tick(2)
        gate.set_view_with_permission('members-page')
        frozen.tick(2)
        assert gate.error == NO_PERMISSION_MESSAGE


def test_resolve_view_rechecks_after_permissions_shrink():
    gate = ViewGate(['manage_stk'])
    gate.set_view_with_permission('stk-management')
    assert gate.resolve_view() == 'stk-management'
    gate.update_permissions([])
    assert gate.resolve_view() == 'dashboard'
    assert gate.current_view == 'dashboard'


def test_allowed_views_lists_dashboard_first():
    gate = ViewGate(['access_members_page', 'create_event'])
    assert gate.allowed_views() == ['dashboard', 'stk-events', 'members-page']


def test_for_user_without_position_gets_nothing():
    class Registry:
        def get_permissions_for_position(self, position):
            assert position is None
            return []
    gate = ViewGate.for_user(Registry(), None)
    assert gate.granted_permissions == frozenset()
    assert gate.allowed_views() == ['dashboard']
