import json
import uuid
from sqlalchemy.orm import Session
from skybook.models.audit_log import AuditLog

# action -> entity type it is recorded against
ACTIONS = {
    "flight.create": "flight",
    "flight.update": "flight",
    "flight.delete": "flight",
    "booking.create": "booking",
    "booking.cancel": "booking",
    "booking.check_in": "booking",
    "payment.completed": "booking",
    "payment.failed": "booking",
}


def log_audit(db: Session, actor_user_id: str, action: str, entity_id: str, **details) -> AuditLog:
    """Stage an audit row; it commits (or rolls back) with the change it describes."""
    try:
        entity_type = ACTIONS[action]
    except KeyError:
        raise ValueError(f"unknown audit action {action!r}")
    row = AuditLog(
        id=str(uuid.uuid4()),
        actor_user_id=actor_user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        # Decimal prices and datetimes fall back to str
        details_json=json.dumps(details, ensure_ascii=False, default=str),
    )
    db.add(row)
    return row


def history(db: Session, entity_type: str, entity_id: str) -> list[dict]:
    rows = (
        db.query(AuditLog)
        .filter(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
        .order_by(AuditLog.created_at.asc())
        .all()
    )
    return [
        {"action": r.action, "actor": r.actor_user_id, "details": json.loads(r.details_json or "{}")}
        for r in rows
    ]
