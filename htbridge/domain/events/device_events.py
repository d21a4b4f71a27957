from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class GatewayCommandAction(str, Enum):
    SET_PROPERTY = "set_property"
    GET_STATUS = "get_status"


class GatewayCommand(BaseModel):
    action: GatewayCommandAction
    device_id: Optional[str] = None
    property: Optional[str] = None
    value: Any = None


class PropertyChangedEvent(BaseModel):
    event_type: str
    device_id: str
    property: str
    value: Any
    unit: Optional[str] = None
    timestamp: str


class PropertySetAck(BaseModel):
    event_type: str
    device_id: Optional[str]
    property: Optional[str]
    value: Any = None
    ok: bool
    error: Optional[str] = None
