# Schemas package
from .charging import ChargingSessionResponse, StartChargingRequest
from .equipment import EquipmentResponse
from .health import HealthResponse
from .swaps import SwapEventResponse

__all__ = [
    "ChargingSessionResponse",
    "EquipmentResponse",
    "HealthResponse",
    "StartChargingRequest",
    "SwapEventResponse",
]
