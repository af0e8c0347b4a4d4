import json
from datetime import date
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hostellite.db.session import init_db
from hostellite.schemas.booking import Room
from hostellite.schemas.payments import PaymentOutcome, PaymentResult
from hostellite.schemas.reservation import ReservationRequest
from hostellite.services.api_client import ApiClient, ApiConfig
from hostellite.services.booking_client import BookingApiClient
from hostellite.services.escalation_service import EscalationLedger
from hostellite.services.orchestrator import BookingOrchestrator
from hostellite.services.payment_client import PaymentGatewayClient
from hostellite.services.session_store import SessionStore

BASE = "http://test.local/api"


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        if text is not None:
            self.text = text
        else:
            self.text = "" if data is None else json.dumps(data)

    def json(self):
        return json.loads(self.text)


class FakeHttp:
    """Scripted stand-in for requests.Session: responses keyed by (METHOD, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, status_code=200, data=None, exc=None, text=None):
        self.routes.setdefault((method.upper(), path), []).append(
            exc if exc is not None else FakeResponse(status_code, data, text)
        )

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(BASE):]
        self.calls.append({"method": method, "path": path, "json": json, "headers": headers, "timeout": timeout})
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"unexpected request {method} {path}")
        resp = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(resp, Exception):
            raise resp
        return resp

    def paths(self, method=None):
        return [c["path"] for c in self.calls if method is None or c["method"] == method]


class FakeSheet:
    def __init__(self, outcome=PaymentOutcome.SUCCESS, message="", init_error=None, raises=None):
        self.result = PaymentResult(outcome=outcome, message=message)
        self.init_error = init_error
        self.raises = raises
        self.inited = []
        self.presented = []

    def init(self, session):
        self.inited.append(session)
        return self.init_error

    def present(self, session):
        self.presented.append(session)
        if self.raises is not None:
            raise self.raises
        return self.result


def booking_json(id="b1", status="pending", payment_status="pending", **extra):
    data = {
        "_id": id,
        "hostel": {"_id": "h1", "name": "Green Hostel", "location": "Lahore"},
        "room": {"_id": "r1", "roomNumber": "101", "totalBeds": 4, "availableBeds": 3, "pricePerBed": 5000},
        "checkInDate": "2024-01-15T00:00:00.000Z",
        "checkOutDate": "2024-03-15T00:00:00.000Z",
        "seatsBooked": 1,
        "amount": 10000,
        "paymentStatus": payment_status,
        "status": status,
    }
    data.update(extra)
    return data


@pytest.fixture
def db_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def store(db_factory):
    s = SessionStore(db_factory)
    s.set_credential("tok-123", "user", user_id="u1", name="Ali")
    return s


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def api(store, http):
    return ApiClient(ApiConfig(base_url=BASE, timeout=5), store, http=http)


@pytest.fixture
def bookings(api):
    return BookingApiClient(api)


@pytest.fixture
def sheet():
    return FakeSheet()


@pytest.fixture
def payments(api, sheet):
    return PaymentGatewayClient(api, sheet, currency="pkr")


@pytest.fixture
def ledger(db_factory):
    return EscalationLedger(db_factory)


@pytest.fixture
def orchestrator(store, bookings, payments, ledger):
    return BookingOrchestrator(store, bookings, payments, ledger)


@pytest.fixture
def room():
    return Room.model_validate({"_id": "r1", "roomNumber": 101, "totalBeds": 4, "availableBeds": 3, "pricePerBed": 5000})


@pytest.fixture
def reservation(room):
    return ReservationRequest.for_room("h1", room, date(2024, 1, 15), date(2024, 3, 15), seats=1)
