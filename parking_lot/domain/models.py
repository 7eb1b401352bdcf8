# File: parking_lot/domain/models.py
"""
Domain Models for the Parking Lot Simulator

This module contains:
1. Value Objects: Car and Money, immutable and validated
2. Entities: ParkingSlot, with a stable slot number and an occupancy lifecycle
3. Enums: SlotState

A slot owns its car exclusively. The car reference exists only while the
slot is occupied and is dropped when the slot is vacated.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN, localcontext
from enum import Enum


# Unbounded precision so sums and products of amounts are never rounded
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


# ============================================================================
# DOMAIN PRIMITIVES / VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)  # Value objects are immutable
class Car:
    """
    Value Object: A car identified by its registration number
    The registration number is an opaque token; uniqueness is not enforced
    """
    registration_number: str

    def __post_init__(self):
        """Validate registration number"""
        if not self.registration_number or not self.registration_number.strip():
            raise ValueError("Registration number cannot be empty")

        if any(ch.isspace() for ch in self.registration_number):
            raise ValueError(
                f"Registration number cannot contain whitespace: {self.registration_number!r}"
            )

    def __str__(self) -> str:
        return self.registration_number


@dataclass(frozen=True)
class Money:
    """
    Value Object: Monetary amount with a currency symbol
    """
    amount: Decimal
    currency_symbol: str = "$"

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money amounts (same currency only)"""
        if self.currency_symbol != other.currency_symbol:
            raise ValueError(f"Cannot add {other.currency_symbol} to {self.currency_symbol}")
        with localcontext(EXACT_CONTEXT):
            return Money(self.amount + other.amount, self.currency_symbol)

    def __mul__(self, multiplier: int) -> 'Money':
        with localcontext(EXACT_CONTEXT):
            return Money(self.amount * Decimal(multiplier), self.currency_symbol)

    def format(self) -> str:
        """Format money for display in plain notation, e.g. $30 or $12.50"""
        amount = self.amount
        if amount == amount.to_integral_value():
            return f"{self.currency_symbol}{int(amount)}"
        return f"{self.currency_symbol}{amount:.2f}"

    def __str__(self) -> str:
        return self.format()


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class SlotState(Enum):
    """
    Occupancy state of a single slot
    FREE -> OCCUPIED on park, OCCUPIED -> FREE on leave
    """
    FREE = "free"
    OCCUPIED = "occupied"


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class ParkingSlot:
    """
    Entity: One numbered space in the lot
    Has identity (slot number) and lifecycle (free/occupied)
    """

    def __init__(self, number: int):
        if number <= 0:
            raise ValueError("Slot number must be positive")

        self.number = number
        self.state = SlotState.FREE
        self.car: Optional[Car] = None
        self.parked_hours = 0

    @property
    def is_occupied(self) -> bool:
        return self.state is SlotState.OCCUPIED

    @property
    def registration_number(self) -> Optional[str]:
        """Registration number of the parked car, if any"""
        return self.car.registration_number if self.car else None

    def occupy(self, car: Car) -> None:
        """
        Occupy the slot with a car
        Raises: ValueError if slot is already occupied
        """
        if self.is_occupied:
            raise ValueError(f"Slot {self.number} is already occupied")

        self.car = car
        self.parked_hours = 0
        self.state = SlotState.OCCUPIED

    def vacate(self) -> Optional[Car]:
        """
        Vacate the slot
        Returns: the car that was parked, None if the slot was free
        """
        if not self.is_occupied:
            return None

        car = self.car
        self.car = None
        self.parked_hours = 0
        self.state = SlotState.FREE
        return car

    def holds(self, registration_number: str) -> bool:
        """Check if the slot is occupied by a car with this registration"""
        return self.is_occupied and self.registration_number == registration_number

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "number": self.number,
            "state": self.state.value,
            "registration_number": self.registration_number,
            "parked_hours": self.parked_hours,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParkingSlot):
            return False
        return self.number == other.number

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.number))

    def __repr__(self) -> str:
        return f"ParkingSlot(number={self.number}, state={self.state.value})"

    def __str__(self) -> str:
        if self.is_occupied:
            return f"Slot {self.number} - Occupied by {self.car}"
        return f"Slot {self.number} - Available"
