from fastapi import APIRouter, Depends

from tracker.api.deps import get_settings, get_store
from tracker.api.schemas import AuthResponse, LoginPayload, RegisterPayload
from tracker.core.config import Settings
from tracker.services import users
from tracker.store.json_store import JsonStore

router = APIRouter()  # main.py mounts at API_PREFIX


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterPayload,
    store: JsonStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
) -> dict:
    token, user = users.register(store, payload.name, payload.email, payload.password, cfg)
    return {"token": token, "user": user}


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginPayload,
    store: JsonStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
) -> dict:
    token, user = users.login(store, payload.email, payload.password, cfg)
    return {"token": token, "user": user}
