
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
import jwt
from tracker.core.config import Settings
from tracker.core.errors import AuthError
from tracker.security.utils import decode_token

security = HTTPBearer(auto_error=False)

def identity_from_credentials(creds: Optional[HTTPAuthorizationCredentials], cfg: Settings) -> dict:
    if not creds:
        raise AuthError("Missing auth")
    try:
        payload = decode_token(creds.credentials, cfg)
    except jwt.PyJWTError:
        raise AuthError("Invalid token")
    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthError("Invalid access token")
    return {"id": payload["sub"], "email": payload.get("email")}

def get_current_identity(request: Request, creds: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    return identity_from_credentials(creds, request.app.state.settings)
