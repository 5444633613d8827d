from fastapi import Request
from tracker.core.config import Settings
from tracker.store.json_store import JsonStore

def get_store(request: Request) -> JsonStore:
    return request.app.state.store

def get_settings(request: Request) -> Settings:
    return request.app.state.settings
