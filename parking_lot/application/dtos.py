# File: parking_lot/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Parking Lot Simulator

DTOs carry the outcome of service operations to the command and
presentation layers. They hold data only, are immutable, and serialize
to plain dictionaries or JSON for logging and tests.
"""

from decimal import Decimal
from typing import Dict, List, Any
import json

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        populate_by_name=True,
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        data = self.model_dump(**kwargs)
        if exclude_none:
            data = {k: v for k, v in data.items() if v is not None}
        return data

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseDTO':
        """Create DTO from dictionary"""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        """Create DTO from JSON string"""
        return cls(**json.loads(json_str))


# ============================================================================
# OPERATION RESULT DTOs
# ============================================================================

class ParkingLotCreatedDTO(BaseDTO):
    """Result of creating the lot"""
    capacity: int = Field(gt=0, description="Number of slots created")


class ParkingAllocationDTO(BaseDTO):
    """Result of parking a car"""
    slot_number: int = Field(gt=0)
    registration_number: str = Field(min_length=1)


class ParkingExitDTO(BaseDTO):
    """Result of a car leaving the lot"""
    registration_number: str = Field(min_length=1)
    slot_number: int = Field(gt=0)
    hours: int = Field(ge=0)
    charge: Decimal = Field(ge=0)
    charge_display: str = Field(description="Charge formatted with currency symbol")


class SlotStatusDTO(BaseDTO):
    """One occupied slot in a status report"""
    slot_number: int = Field(gt=0)
    registration_number: str = Field(min_length=1)


class ParkingLotStatusDTO(BaseDTO):
    """Occupancy snapshot of the lot"""
    capacity: int = Field(gt=0)
    occupied_count: int = Field(ge=0)
    available_count: int = Field(ge=0)
    occupied_slots: List[SlotStatusDTO] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.occupied_count == 0

    @property
    def is_full(self) -> bool:
        return self.available_count == 0
