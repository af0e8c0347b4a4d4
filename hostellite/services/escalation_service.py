import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List

from sqlalchemy.orm import Session

from hostellite.db.session import SessionLocal
from hostellite.models.escalation import ConfirmationEscalation
from hostellite.schemas.reservation import ReservationRequest
from hostellite.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def record_confirmation_failure(db: Session, booking_id: str, payment_intent_id: str,
                                reservation: ReservationRequest, error: str) -> str:
    """Queue a paid-but-unconfirmed booking so it is reconciled or escalated, never dropped."""
    eid = str(uuid.uuid4())
    db.add(ConfirmationEscalation(
        id=eid,
        booking_id=booking_id,
        payment_intent_id=payment_intent_id or "",
        reservation_json=reservation.model_dump_json(),
        status="queued",
        last_error=error,
    ))
    log_audit(db, actor="orchestrator", action="confirmation.failed", booking_id=booking_id,
              details={"paymentIntentId": payment_intent_id, "error": error})
    db.commit()
    logger.error("Booking %s paid (intent %s) but not confirmed: %s", booking_id, payment_intent_id, error)
    return eid


def queued_escalations(db: Session, limit: int = 50) -> List[ConfirmationEscalation]:
    return (
        db.query(ConfirmationEscalation)
        .filter(ConfirmationEscalation.status == "queued")
        .order_by(ConfirmationEscalation.created_at.asc())
        .limit(limit)
        .all()
    )


def reservation_of(row: ConfirmationEscalation) -> ReservationRequest:
    return ReservationRequest.model_validate(json.loads(row.reservation_json or "{}"))


def mark_resolved(db: Session, row: ConfirmationEscalation, how: str) -> None:
    row.status = "resolved"
    row.resolved_at = datetime.now(timezone.utc)
    log_audit(db, actor="reconciler", action="confirmation.resolved", booking_id=row.booking_id,
              details={"how": how, "attempts": row.attempts})


def mark_attempt_failed(db: Session, row: ConfirmationEscalation, error: str, max_attempts: int) -> None:
    row.attempts = (row.attempts or 0) + 1
    row.last_error = error
    if row.attempts >= max_attempts:
        row.status = "escalated"
        log_audit(db, actor="reconciler", action="confirmation.escalated", booking_id=row.booking_id,
                  details={"attempts": row.attempts, "error": error})
        logger.error("Booking %s escalated for manual follow-up after %s attempts", row.booking_id, row.attempts)


class EscalationLedger:
    """What the orchestrator holds on to: opens its own DB session per record."""

    def __init__(self, db_factory: Callable[[], Session] = SessionLocal):
        self._db_factory = db_factory

    def record(self, booking_id: str, payment_intent_id: str, reservation: ReservationRequest, error: str) -> str:
        db = self._db_factory()
        try:
            return record_confirmation_failure(db, booking_id, payment_intent_id, reservation, error)
        finally:
            db.close()
