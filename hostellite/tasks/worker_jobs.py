import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError

from hostellite.core.config import settings
from hostellite.core.errors import AuthError, HostelliteError
from hostellite.db.session import SessionLocal
from hostellite.services.booking_client import BookingApiClient
from hostellite.services.escalation_service import (
    mark_attempt_failed, mark_resolved, queued_escalations, reservation_of,
)

logger = logging.getLogger(__name__)


def reconcile_confirmations(limit: int = 50, bookings: Optional[BookingApiClient] = None,
                            db_factory: Callable[[], Session] = SessionLocal,
                            max_attempts: int | None = None) -> dict:
    """Settle bookings that were paid but never confirmed.

    The server is asked first; a booking it already finalized is resolved without another
    confirmation call, since the payment reference may already be consumed. Otherwise one
    confirmation attempt per run, escalating after `max_attempts`.
    """
    if max_attempts is None:
        max_attempts = settings.RECONCILE_MAX_ATTEMPTS
    if bookings is None:
        from hostellite.main import build_context
        bookings = build_context().bookings

    db: Session = db_factory()
    try:
        try:
            rows = queued_escalations(db, limit=limit)
        except OperationalError:
            # store not initialised yet; don't crash the worker
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        if not rows:
            return {"resolved": 0, "escalated": 0, "pending": 0}

        try:
            finalized = {b.id for b in bookings.list_user_bookings() if b.is_finalized}
        except AuthError:
            logger.warning("Reconciliation skipped: not logged in")
            return {"skipped": True, "reason": "unauthenticated"}
        except HostelliteError as e:
            logger.warning("Reconciliation skipped: %s", e.message)
            return {"skipped": True, "reason": e.kind}

        resolved = escalated = 0
        for row in rows:
            if row.booking_id in finalized:
                mark_resolved(db, row, how="already_confirmed")
                resolved += 1
                continue
            try:
                bookings.confirm_booking(row.booking_id, row.payment_intent_id or None, reservation_of(row))
            except AuthError:
                logger.warning("Reconciliation stopped: credential expired")
                break
            except HostelliteError as e:
                mark_attempt_failed(db, row, e.message, max_attempts)
                if row.status == "escalated":
                    escalated += 1
                continue
            mark_resolved(db, row, how="confirmed")
            resolved += 1
        db.commit()
        pending = len([r for r in rows if r.status == "queued"])
        logger.info("Reconciliation: %s resolved, %s escalated, %s pending", resolved, escalated, pending)
        return {"resolved": resolved, "escalated": escalated, "pending": pending}
    finally:
        db.close()
