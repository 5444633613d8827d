import logging
import secrets
import string
from typing import Any, Dict, List, Optional, Union

from tracker.core.errors import ForbiddenError, NotFoundError, ValidationError
from tracker.security.utils import generate_id, now_utc
from tracker.store.json_store import JsonStore
from tracker.store.models import DEFAULT_SERVICE, DEFAULT_WEIGHT, STAGES, ShipmentStatus

log = logging.getLogger(__name__)

TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_LENGTH = 10


def now_iso() -> str:
    return now_utc().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_tracking_code(store: JsonStore) -> str:
    while True:
        code = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))
        if not store.tracking_exists(code):
            return code


def next_stage(current: str) -> str:
    # unknown statuses restart the sequence
    idx = STAGES.index(current) if current in STAGES else -1
    return STAGES[min(idx + 1, len(STAGES) - 1)]


def create(
    store: JsonStore,
    owner_id: str,
    to_name: Optional[str],
    to_address: Optional[str],
    weight: Optional[Union[str, int, float]] = None,
    service: Optional[str] = None,
) -> Dict[str, Any]:
    if not to_name or not to_address:
        raise ValidationError("toName & toAddress required")

    created_at = now_iso()
    with store.transaction():
        shipment = {
            "id": generate_id(),
            "tracking": generate_tracking_code(store),
            "createdAt": created_at,
            "status": ShipmentStatus.LABEL_CREATED.value,
            "service": service or DEFAULT_SERVICE,
            "weight": weight or DEFAULT_WEIGHT,
            "toName": to_name,
            "toAddress": to_address,
            "history": [{"status": ShipmentStatus.LABEL_CREATED.value, "at": created_at}],
            "owner": owner_id,
        }
        shipment = store.add_shipment(shipment)
    log.info("Created shipment %s for user %s", shipment["tracking"], owner_id)
    return shipment


def lookup(store: JsonStore, tracking: str) -> Dict[str, Any]:
    shipment = store.get_shipment(tracking.upper())
    if not shipment:
        raise NotFoundError("Not found")
    return shipment


def list_for_owner(store: JsonStore, owner_id: str) -> List[Dict[str, Any]]:
    return store.shipments_for_owner(owner_id)


def advance(store: JsonStore, tracking: str, actor_id: Optional[str] = None) -> Dict[str, Any]:
    """Move a shipment one stage forward and record it in its history.

    At ``Delivered`` the status stays put but another ``Delivered`` entry
    is still appended.  When ``actor_id`` is given it must be the owner.
    """
    def _step(shipment: Dict[str, Any]) -> None:
        if actor_id is not None and shipment.get("owner") != actor_id:
            raise ForbiddenError("Not your shipment")
        status = next_stage(shipment.get("status"))
        shipment["status"] = status
        shipment.setdefault("history", []).append({"status": status, "at": now_iso()})

    shipment = store.update_shipment(tracking.upper(), _step)
    if shipment is None:
        raise NotFoundError("Not found")
    log.info("Shipment %s advanced to %s", shipment["tracking"], shipment["status"])
    return shipment
