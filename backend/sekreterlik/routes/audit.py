from flask import Blueprint, request, abort
from sekreterlik import get_db
from sekreterlik.models.audit import AuditLog
from sekreterlik.config.pagination import paginate
from sekreterlik.decorators.auth import require_admin

audit_bp = Blueprint('audit', __name__)


@audit_bp.get('/logs')
@require_admin
def list_audit_logs():
    session = get_db()
    q = session.query(AuditLog)
    action = request.args.get('action')
    entity_id = request.args.get('entity_id')
    if action:
        q = q.filter(AuditLog.action == action)
    if entity_id:
        q = q.filter(AuditLog.entity_id == entity_id)
    try:
        rows, meta = paginate(q, request.args.get('limit'), request.args.get('offset'), AuditLog.id.desc())
    except ValueError as e:
        abort(400, description=str(e))
    return {'data': [r.to_dict() for r in rows], 'pagination': meta}
