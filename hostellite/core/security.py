from datetime import datetime, timezone

from jose import jwt
from jose.exceptions import JOSEError


def token_claims(token: str) -> dict:
    """Claims of a JWT bearer token without verifying the signature.

    The backend owns the signing key; the client only peeks at `exp` and `role`.
    Opaque (non-JWT) tokens yield an empty dict.
    """
    try:
        return jwt.get_unverified_claims(token)
    except JOSEError:
        return {}


def is_token_expired(token: str, now: datetime | None = None) -> bool:
    exp = token_claims(token).get("exp")
    if exp is None:
        return False
    if now is None:
        now = datetime.now(timezone.utc)
    return datetime.fromtimestamp(int(exp), tz=timezone.utc) <= now
