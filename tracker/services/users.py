import logging
from typing import Any, Dict, Optional, Tuple

from tracker.core.config import Settings
from tracker.core.errors import ConflictError, InvalidCredentials, ValidationError
from tracker.security.utils import create_access_token, generate_id, hash_password, verify_password
from tracker.store.json_store import JsonStore

log = logging.getLogger(__name__)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": user["id"], "name": user.get("name", ""), "email": user["email"]}


def register(
    store: JsonStore,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    cfg: Optional[Settings] = None,
) -> Tuple[str, Dict[str, Any]]:
    if not email or not password:
        raise ValidationError("email & password required")

    if store.find_user_by_email(email):
        raise ConflictError("User exists")

    # add_user re-checks under the writer lock
    user = store.add_user({
        "id": generate_id(),
        "name": name or "",
        "email": email.lower(),
        "password": hash_password(password, cfg),
    })
    log.info("Registered user %s", user["id"])
    token, _ = create_access_token(user["id"], user["email"], cfg)
    return token, public_user(user)


def login(
    store: JsonStore,
    email: Optional[str],
    password: Optional[str],
    cfg: Optional[Settings] = None,
) -> Tuple[str, Dict[str, Any]]:
    if not email or not password:
        raise ValidationError("email & password required")

    user = store.find_user_by_email(email)
    if not user or not verify_password(password, user["password"]):
        raise InvalidCredentials("Invalid credentials")

    token, _ = create_access_token(user["id"], user["email"], cfg)
    return token, public_user(user)
