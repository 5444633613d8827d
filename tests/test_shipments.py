import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from tracker.core.errors import ForbiddenError, NotFoundError, ValidationError
from tracker.services import shipments
from tracker.store.models import STAGES


@pytest.fixture
def shipment(store):
    return shipments.create(store, "owner-1", "Bob", "1 Rd")


def test_create_fills_defaults(shipment):
    assert re.fullmatch(r"[A-Z0-9]{10}", shipment["tracking"])
    assert shipment["status"] == "Label Created"
    assert shipment["service"] == "Ground"
    assert shipment["weight"] == "0.0"
    assert shipment["owner"] == "owner-1"
    assert shipment["history"] == [{"status": "Label Created", "at": shipment["createdAt"]}]


def test_create_keeps_given_weight_and_service(store):
    s = shipments.create(store, "owner-1", "Bob", "1 Rd", weight=2.5, service="Express")
    assert s["weight"] == 2.5
    assert s["service"] == "Express"


@pytest.mark.parametrize("to_name,to_address", [(None, "1 Rd"), ("Bob", None), ("", "1 Rd"), ("Bob", "")])
def test_create_requires_recipient(store, to_name, to_address):
    with pytest.raises(ValidationError):
        shipments.create(store, "owner-1", to_name, to_address)
    assert store.shipments == []


def test_lookup_uppercases_code(store, shipment):
    assert shipments.lookup(store, shipment["tracking"].lower())["id"] == shipment["id"]


def test_lookup_unknown_code(store):
    with pytest.raises(NotFoundError):
        shipments.lookup(store, "NOSUCHCODE")


def test_advance_moves_one_stage(store, shipment):
    s = shipments.advance(store, shipment["tracking"])
    assert s["status"] == "Picked Up"
    assert [h["status"] for h in s["history"]] == ["Label Created", "Picked Up"]
    assert shipments.lookup(store, shipment["tracking"])["status"] == "Picked Up"


@pytest.mark.parametrize("n", [4, 5, 7])
def test_advance_stops_at_delivered(store, shipment, n):
    for _ in range(n):
        s = shipments.advance(store, shipment["tracking"])

    assert s["status"] == "Delivered"
    statuses = [h["status"] for h in s["history"]]
    # each call appends an entry, including repeats at the terminal stage
    assert len(statuses) == n + 1
    assert statuses[:5] == STAGES
    assert set(statuses[5:]) <= {"Delivered"}
    assert statuses[-1] == s["status"]


def test_advance_unknown_code(store):
    with pytest.raises(NotFoundError):
        shipments.advance(store, "NOSUCHCODE")


def test_advance_by_other_user_is_rejected(store, shipment):
    with pytest.raises(ForbiddenError):
        shipments.advance(store, shipment["tracking"], actor_id="someone-else")
    assert shipments.lookup(store, shipment["tracking"])["history"] == shipment["history"]

    s = shipments.advance(store, shipment["tracking"], actor_id="owner-1")
    assert s["status"] == "Picked Up"


def test_unknown_status_restarts_sequence():
    assert shipments.next_stage("Lost") == "Label Created"
    assert shipments.next_stage("Out for Delivery") == "Delivered"
    assert shipments.next_stage("Delivered") == "Delivered"


def test_concurrent_advances_are_not_lost(store, shipment):
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda _: shipments.advance(store, shipment["tracking"]), range(4)))

    s = shipments.lookup(store, shipment["tracking"])
    assert s["status"] == "Delivered"
    assert [h["status"] for h in s["history"]] == STAGES


def test_list_for_owner(store):
    a = shipments.create(store, "owner-1", "Bob", "1 Rd")
    shipments.create(store, "owner-2", "Eve", "2 Rd")
    c = shipments.create(store, "owner-1", "Ann", "3 Rd")
    assert [s["tracking"] for s in shipments.list_for_owner(store, "owner-1")] == [a["tracking"], c["tracking"]]


def test_tracking_codes_skip_used_ones(store, monkeypatch):
    taken = shipments.create(store, "owner-1", "Bob", "1 Rd")["tracking"]
    picks = iter(list(taken) + list("NEWCODE123"))
    monkeypatch.setattr(shipments.secrets, "choice", lambda alphabet: next(picks))
    assert shipments.generate_tracking_code(store) == "NEWCODE123"
