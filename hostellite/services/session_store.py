import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from hostellite.core.errors import AuthError
from hostellite.core.security import is_token_expired
from hostellite.db.session import SessionLocal
from hostellite.models.credential import CURRENT_KEY, StoredCredential

logger = logging.getLogger(__name__)


class SessionStore:
    """Who is logged in, with which bearer token and role.

    Login sets it, logout clears it; API clients only ever read it. The credential is
    mirrored into durable storage so a restarted client (or the reconciliation worker)
    picks it up again.
    """

    def __init__(self, db_factory: Callable[[], Session] = SessionLocal):
        self._db_factory = db_factory
        self.token: Optional[str] = None
        self.role: Optional[str] = None
        self.user_id: Optional[str] = None
        self.user_name: Optional[str] = None
        self._load()

    def _load(self) -> None:
        db = self._db_factory()
        try:
            row = db.get(StoredCredential, CURRENT_KEY)
            if row:
                self.token = row.token
                self.role = row.role
                self.user_id = row.user_id
                self.user_name = row.user_name
        finally:
            db.close()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and not is_token_expired(self.token)

    def set_credential(self, token: str, role: str, user_id: str | None = None, name: str | None = None) -> None:
        if not token:
            raise AuthError("Empty token")
        db = self._db_factory()
        try:
            row = db.get(StoredCredential, CURRENT_KEY)
            if not row:
                row = StoredCredential(key=CURRENT_KEY, token=token)
                db.add(row)
            row.token = token
            row.role = role or "user"
            row.user_id = user_id
            row.user_name = name
            row.saved_at = datetime.now(timezone.utc)
            db.commit()
        finally:
            db.close()
        self.token, self.role, self.user_id, self.user_name = token, role or "user", user_id, name
        logger.info("Credential stored for role=%s", self.role)

    def clear(self) -> None:
        db = self._db_factory()
        try:
            db.query(StoredCredential).filter(StoredCredential.key == CURRENT_KEY).delete()
            db.commit()
        finally:
            db.close()
        self.token = self.role = self.user_id = self.user_name = None
        logger.info("Credential cleared")

    def require_token(self) -> str:
        if not self.token:
            raise AuthError("Authentication required", status_code=401)
        if is_token_expired(self.token):
            raise AuthError("Session expired, please login again", status_code=401)
        return self.token
