from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import jwt, uuid
from typing import Optional, Tuple
from tracker.core.config import Settings, settings

@lru_cache(maxsize=None)
def pwd_ctx(rounds: int) -> CryptContext:
    return CryptContext(schemes=['bcrypt'], deprecated='auto', bcrypt__rounds=rounds)

def hash_password(p: str, cfg: Optional[Settings] = None) -> str:
    return pwd_ctx((cfg or settings).BCRYPT_ROUNDS).hash(p)

# rounds are read from the hash itself
def verify_password(p: str, h: str) -> bool: return pwd_ctx(settings.BCRYPT_ROUNDS).verify(p, h)

def now_utc() -> datetime: return datetime.now(timezone.utc)

def generate_id() -> str: return uuid.uuid4().hex

def create_access_token(user_id: str, email: str, cfg: Optional[Settings] = None) -> Tuple[str, datetime]:
    cfg = cfg or settings
    iat = now_utc()
    exp = iat + timedelta(days=cfg.TOKEN_EXPIRES_DAYS)
    payload = {'sub': user_id, 'email': email, 'iat': iat, 'exp': exp, 'type': 'access'}
    return jwt.encode(payload, cfg.JWT_SECRET, algorithm=cfg.JWT_ALGORITHM), exp

def decode_token(token: str, cfg: Optional[Settings] = None) -> dict:
    cfg = cfg or settings
    return jwt.decode(token, cfg.JWT_SECRET, algorithms=[cfg.JWT_ALGORITHM], options={'require': ['exp', 'sub']})
