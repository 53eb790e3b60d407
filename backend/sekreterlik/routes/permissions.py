from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import jwt_required
from sekreterlik import get_db
from sekreterlik.constants.permissions import AVAILABLE_PERMISSIONS, unknown_permission_keys
from sekreterlik.services.policy import (
    all_position_permissions,
    permissions_for_position,
    replace_position_permissions,
)
from sekreterlik.decorators.auth import require_admin
from sekreterlik.decorators.audit import audit_log

perm_bp = Blueprint('permissions', __name__)
catalog_bp = Blueprint('permission_catalog', __name__)


def _prefetch_position(position: str):  # audit pre_fetch helper
    return {'permissions': permissions_for_position(position)}


@perm_bp.get('')
@jwt_required()
def list_position_permissions():
    return all_position_permissions()


@perm_bp.get('/<path:position>')
@jwt_required()
def get_position_permissions(position: str):
    return permissions_for_position(position)


@perm_bp.post('/<path:position>')
@require_admin
@audit_log(
    'POSITION.PERM.REPLACE',
    entity='Position',
    entity_id_arg='position',
    diff_keys=['permissions'],
    pre_fetch=lambda a, kw: _prefetch_position(kw.get('position')),
)
def set_position_permissions(position: str):
    data = request.get_json(silent=True) or {}
    permissions = data.get('permissions')
    if not isinstance(permissions, list) or any(not isinstance(p, str) for p in permissions):
        abort(400, description='permissions dizi olmalı')
    if current_app.config.get('STRICT_PERMISSION_KEYS', False):
        unknown = unknown_permission_keys(permissions)
        if unknown:
            abort(400, description=f'Bilinmeyen yetki anahtarları: {unknown}')
    keys = replace_position_permissions(position, permissions)
    get_db().commit()
    current_app.logger.info('Permissions for position %r replaced (%d keys)', position, len(keys))
    return {'success': True, 'position': position, 'permissions': keys}


@perm_bp.delete('/<path:position>')
@require_admin
@audit_log(
    'POSITION.PERM.CLEAR',
    entity='Position',
    entity_id_arg='position',
    diff_keys=['permissions'],
    pre_fetch=lambda a, kw: _prefetch_position(kw.get('position')),
)
def clear_position_permissions(position: str):
    replace_position_permissions(position, [])
    get_db().commit()
    return {'success': True, 'position': position, 'permissions': []}


@catalog_bp.get('/permission-catalog')
@jwt_required()
def permission_catalog():
    return list(AVAILABLE_PERMISSIONS)
