"""Wiring: one explicit context per logged-in client instead of ambient globals."""
from dataclasses import dataclass

from hostellite.db.session import SessionLocal, init_db
from hostellite.services.api_client import ApiClient, ApiConfig
from hostellite.services.booking_client import BookingApiClient
from hostellite.services.escalation_service import EscalationLedger
from hostellite.services.orchestrator import BookingOrchestrator
from hostellite.services.payment_client import PaymentGatewayClient, PaymentSheet
from hostellite.services.session_store import SessionStore
from hostellite.services.stripe_sheet import StripePaymentSheet


@dataclass
class ClientContext:
    session: SessionStore
    api: ApiClient
    bookings: BookingApiClient
    payments: PaymentGatewayClient
    escalations: EscalationLedger

    def new_booking_workflow(self) -> BookingOrchestrator:
        """One orchestrator per reservation attempt."""
        return BookingOrchestrator(self.session, self.bookings, self.payments, self.escalations)


def build_context(cfg: ApiConfig | None = None, sheet: PaymentSheet | None = None,
                  db_factory=SessionLocal, http=None) -> ClientContext:
    if db_factory is SessionLocal:
        init_db()
    session = SessionStore(db_factory)
    api = ApiClient(cfg or ApiConfig.from_settings(), session, http=http)
    return ClientContext(
        session=session,
        api=api,
        bookings=BookingApiClient(api),
        payments=PaymentGatewayClient(api, sheet or StripePaymentSheet()),
        escalations=EscalationLedger(db_factory),
    )
