from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity
from sqlalchemy import select
from sekreterlik import get_db
from sekreterlik.models.authz import User
from sekreterlik.constants.roles import Role, VALID_ROLES
from sekreterlik.services.policy import authenticate, permissions_for_position, allowed_views
from sekreterlik.decorators.auth import require_admin
from sekreterlik.decorators.audit import audit_log

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        return {'success': False, 'message': 'Kullanıcı adı ve şifre zorunludur'}, 400
    user = authenticate(username, password)
    if not user:
        current_app.logger.info('Login failed for %s', username)
        return {'success': False, 'message': 'Geçersiz kullanıcı adı veya şifre'}, 401
    claims = {'role': user.role, 'position': user.position}
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims=claims)
    return {'success': True, 'token': token, 'user': user.to_payload()}


@auth_bp.post('/logout')
def logout():
    # Tokens are stateless; the client drops its copy
    return {'success': True, 'message': 'Çıkış yapıldı'}


@auth_bp.get('/me')
@jwt_required()
def me():
    user_id = int(get_jwt_identity())
    session = get_db()
    user = session.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if not user or not user.is_active:
        abort(404)
    granted = permissions_for_position(user.position)
    payload = user.to_payload()
    payload['permissions'] = granted
    payload['views'] = allowed_views(granted)
    return payload


@auth_bp.get('/member-users')
@require_admin
def list_member_users():
    session = get_db()
    rows = session.execute(select(User).where(User.role != Role.ADMIN).order_by(User.id.asc())).scalars().all()
    return {'success': True, 'users': [u.to_payload() for u in rows]}


@auth_bp.post('/member-users')
@require_admin
@audit_log('USER.CREATE', entity='User', entity_id_key='id', meta_keys=['username', 'role', 'position'])
def create_member_user():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    name = (data.get('name') or '').strip()
    role = data.get('role') or Role.MEMBER
    if not username or not password or not name:
        abort(400, description='username, password & name required')
    if role not in VALID_ROLES or role == Role.ADMIN:
        abort(400, description=f'invalid role: {role}')
    session = get_db()
    if session.execute(select(User).where(User.username == username)).scalar_one_or_none():
        abort(400, description='username exists')
    user = User(
        username=username,
        name=name,
        role=role,
        position=data.get('position'),
        member_id=data.get('memberId'),
        town_id=data.get('townId'),
        district_id=data.get('districtId'),
        password_hash='',
    )
    user.set_password(password)
    session.add(user)
    session.commit()
    return user.to_payload(), 201
