from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional

from tracker.api.deps import get_settings, get_store
from tracker.api.schemas import CreateShipment, ShipmentEnvelope, ShipmentList
from tracker.core.auth import get_current_identity, identity_from_credentials, security
from tracker.core.config import Settings
from tracker.services import shipments
from tracker.store.json_store import JsonStore

router = APIRouter()

@router.post("/shipments", response_model=ShipmentEnvelope)
def create_shipment(
    payload: CreateShipment,
    identity: dict = Depends(get_current_identity),
    store: JsonStore = Depends(get_store),
):
    shp = shipments.create(
        store,
        owner_id=identity["id"],
        to_name=payload.toName,
        to_address=payload.toAddress,
        weight=payload.weight,
        service=payload.service,
    )
    return {"shipment": shp}

# Public: anyone holding the tracking code may look it up
@router.get("/shipments/{tracking}", response_model=ShipmentEnvelope)
def get_shipment(tracking: str, store: JsonStore = Depends(get_store)):
    return {"shipment": shipments.lookup(store, tracking)}

@router.get("/my-shipments", response_model=ShipmentList)
def my_shipments(identity: dict = Depends(get_current_identity), store: JsonStore = Depends(get_store)):
    return {"shipments": shipments.list_for_owner(store, identity["id"])}

@router.post("/shipments/{tracking}/advance", response_model=ShipmentEnvelope)
def advance_shipment(
    tracking: str,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: JsonStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    actor_id = None
    if cfg.REQUIRE_OWNER_FOR_ADVANCE:
        actor_id = identity_from_credentials(creds, cfg)["id"]
    return {"shipment": shipments.advance(store, tracking, actor_id=actor_id)}
