import uuid, json
from sqlalchemy.orm import Session
from hostellite.models.audit_log import AuditLog

def log_audit(db: Session, actor: str, action: str, booking_id: str, details: dict | None = None):
    db.add(AuditLog(
        id=str(uuid.uuid4()),
        actor=actor,
        action=action,
        booking_id=booking_id,
        details_json=json.dumps(details or {}, ensure_ascii=False, default=str),
    ))
