# In-memory indices over the JSON document; mutations are written through under one lock.

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from tracker.core.errors import ConflictError

log = logging.getLogger(__name__)

Record = Dict[str, Any]


def empty_document() -> Dict[str, List[Record]]:
    return {"users": [], "shipments": []}


class JsonStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        # path=None keeps everything in memory
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self._depth = 0
        self.reload()

    # ---------- persistence ----------
    def reload(self) -> None:
        """Load the document from disk and rebuild the indices.

        A missing file is created with empty ``users`` and ``shipments``.
        """
        with self._lock:
            doc = empty_document()
            if self.path and self.path.exists():
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    doc["users"] = list(loaded.get("users") or [])
                    doc["shipments"] = list(loaded.get("shipments") or [])
                log.info("Loaded %d users and %d shipments from %s",
                         len(doc["users"]), len(doc["shipments"]), self.path)
            self._index(doc)
            if self.path and not self.path.exists():
                log.info("Creating data file %s", self.path)
                self.persist()

    def _index(self, doc: Dict[str, List[Record]]) -> None:
        self.users: List[Record] = []
        self.shipments: List[Record] = []
        self._users_by_id: Dict[str, Record] = {}
        self._users_by_email: Dict[str, Record] = {}
        self._shipments_by_tracking: Dict[str, Record] = {}
        self._tracking_by_owner: Dict[str, List[str]] = {}
        for user in doc["users"]:
            if user.get("email", "").lower() in self._users_by_email:
                log.warning("Skipping duplicate user email %s in data file", user.get("email"))
                continue
            self._put_user(user)
        for shipment in doc["shipments"]:
            if shipment.get("tracking") in self._shipments_by_tracking:
                log.warning("Skipping duplicate tracking code %s in data file", shipment.get("tracking"))
                continue
            self._put_shipment(shipment)

    def persist(self) -> None:
        if self.path is None:
            return
        with self._lock:
            doc = {"users": self.users, "shipments": self.shipments}
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(doc, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.path)
            except OSError:
                log.exception("Failed to write data file %s", self.path)
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise

    @contextmanager
    def transaction(self) -> Iterator["JsonStore"]:
        """Hold the writer lock for a read-modify-write cycle.

        The outermost block persists on exit.  If the block or the write
        fails, memory is restored to its state on entry.
        """
        with self._lock:
            outer = self._depth == 0
            snapshot = copy.deepcopy({"users": self.users, "shipments": self.shipments}) if outer else None
            self._depth += 1
            try:
                yield self
                if outer:
                    self.persist()
            except BaseException:
                if outer:
                    log.warning("Rolling back in-memory changes")
                    self._index(snapshot)
                raise
            finally:
                self._depth -= 1

    # ---------- users ----------
    def _put_user(self, user: Record) -> None:
        self.users.append(user)
        self._users_by_id[user["id"]] = user
        self._users_by_email[user["email"].lower()] = user

    def add_user(self, user: Record) -> Record:
        with self.transaction():
            if user["email"].lower() in self._users_by_email:
                raise ConflictError("User exists")
            self._put_user(user)
        return copy.deepcopy(user)

    def get_user(self, user_id: str) -> Optional[Record]:
        with self._lock:
            user = self._users_by_id.get(user_id)
            return copy.deepcopy(user) if user else None

    def find_user_by_email(self, email: str) -> Optional[Record]:
        with self._lock:
            user = self._users_by_email.get(email.lower())
            return copy.deepcopy(user) if user else None

    # ---------- shipments ----------
    def _put_shipment(self, shipment: Record) -> None:
        self.shipments.append(shipment)
        self._shipments_by_tracking[shipment["tracking"]] = shipment
        self._tracking_by_owner.setdefault(shipment.get("owner"), []).append(shipment["tracking"])

    def tracking_exists(self, tracking: str) -> bool:
        with self._lock:
            return tracking in self._shipments_by_tracking

    def add_shipment(self, shipment: Record) -> Record:
        with self.transaction():
            if shipment["tracking"] in self._shipments_by_tracking:
                raise ConflictError("Tracking code already in use")
            self._put_shipment(shipment)
        return copy.deepcopy(shipment)

    def get_shipment(self, tracking: str) -> Optional[Record]:
        with self._lock:
            shipment = self._shipments_by_tracking.get(tracking)
            return copy.deepcopy(shipment) if shipment else None

    def shipments_for_owner(self, owner_id: str) -> List[Record]:
        with self._lock:
            return [copy.deepcopy(self._shipments_by_tracking[t])
                    for t in self._tracking_by_owner.get(owner_id, [])]

    def update_shipment(self, tracking: str, fn: Callable[[Record], None]) -> Optional[Record]:
        """Apply ``fn`` to the stored shipment and persist, under the writer lock.

        Returns a copy of the updated record, or ``None`` when the tracking
        code is unknown.  If ``fn`` raises, nothing is persisted.
        """
        with self._lock:
            shipment = self._shipments_by_tracking.get(tracking)
            if shipment is None:
                return None
            with self.transaction():
                fn(shipment)
            return copy.deepcopy(shipment)
