import logging

from hostellite.schemas.auth import LoginRequest, LoginResponse
from hostellite.services.api_client import ApiClient, parse_model

logger = logging.getLogger(__name__)


def login(api: ApiClient, email: str, password: str) -> LoginResponse:
    """Authenticate and store the credential; every later call uses it."""
    body = LoginRequest(email=email.strip().lower(), password=password)
    data = api.post("/users/login", body.model_dump(), auth=False)
    out = parse_model(LoginResponse, data or {})
    api.session.set_credential(out.token, out.user.role, user_id=out.user.id or None, name=out.user.name or None)
    logger.info("Logged in as role=%s", out.user.role)
    return out


def logout(api: ApiClient) -> None:
    api.session.clear()
