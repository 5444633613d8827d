from pydantic import BaseModel
from typing import List, Optional, Union

# Request fields stay optional; the services report missing ones as 400s
class RegisterPayload(BaseModel):
    name: Optional[str] = ''
    email: Optional[str] = None
    password: Optional[str] = None

class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class CreateShipment(BaseModel):
    toName: Optional[str] = None
    toAddress: Optional[str] = None
    weight: Optional[Union[str, int, float]] = None
    service: Optional[str] = None

class UserRead(BaseModel):
    id: str
    name: str = ''
    email: str

class AuthResponse(BaseModel):
    token: str
    user: UserRead

class HistoryEntry(BaseModel):
    status: str
    at: str

class ShipmentOut(BaseModel):
    id: str
    tracking: str
    createdAt: str
    status: str
    service: str
    weight: Optional[Union[str, int, float]] = None
    toName: str
    toAddress: str
    history: List[HistoryEntry] = []
    owner: Optional[str] = None

class ShipmentEnvelope(BaseModel):
    shipment: ShipmentOut

class ShipmentList(BaseModel):
    shipments: List[ShipmentOut] = []
