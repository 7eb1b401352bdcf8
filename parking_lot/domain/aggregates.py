# File: parking_lot/domain/aggregates.py
"""
Aggregate Roots for the Parking Lot Simulator
Following Domain-Driven Design (DDD) Aggregate Pattern

The ParkingLot is the single aggregate root. Slots and cars are reached
only through it, and every mutation goes through its methods so the
occupied-count invariant cannot drift from the slot table.
"""

from typing import List, Optional, Tuple, Dict, Any
import logging

from .models import Car, ParkingSlot


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot:
    """
    Base class for all aggregate roots
    Provides versioning and invariant checking hooks
    """

    def __init__(self):
        self._version: int = 1
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def version(self) -> int:
        """Get current aggregate version"""
        return self._version

    def _increment_version(self) -> None:
        """Increment version after state change"""
        self._version += 1

    def _validate_invariants(self) -> None:
        """Validate aggregate invariants - to be overridden by subclasses"""
        pass


# ============================================================================
# PARKING LOT AGGREGATE
# ============================================================================

class ParkingLot(AggregateRoot):
    """
    Aggregate Root: Single-level parking lot with a fixed number of slots
    Slots are numbered 1..capacity and live as long as the lot does
    """

    def __init__(self, capacity: int):
        super().__init__()
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")

        self._capacity = capacity
        self._slots: List[ParkingSlot] = [
            ParkingSlot(number) for number in range(1, capacity + 1)
        ]
        self._occupied_count = 0

        self._validate_invariants()
        self._logger.info(f"Created ParkingLot with {capacity} slots")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied_count(self) -> int:
        return self._occupied_count

    @property
    def available_count(self) -> int:
        return self._capacity - self._occupied_count

    @property
    def slots(self) -> Tuple[ParkingSlot, ...]:
        """Read-only view of all slots in slot-number order"""
        return tuple(self._slots)

    def is_full(self) -> bool:
        return self._occupied_count >= self._capacity

    def is_empty(self) -> bool:
        return self._occupied_count == 0

    def _validate_invariants(self) -> None:
        """Validate aggregate invariants"""
        # Invariant 1: Slot count must match capacity
        if len(self._slots) != self._capacity:
            raise ValueError(
                f"Slot count mismatch: {len(self._slots)} slots, "
                f"expected {self._capacity} from capacity"
            )

        # Invariant 2: Slot numbers run 1..capacity in order
        for index, slot in enumerate(self._slots, start=1):
            if slot.number != index:
                raise ValueError(f"Slot at position {index} has number {slot.number}")

        # Invariant 3: Occupied count matches slot state
        actual = sum(1 for slot in self._slots if slot.is_occupied)
        if actual != self._occupied_count:
            raise ValueError(
                f"Occupied count mismatch: counter says {self._occupied_count}, "
                f"slots say {actual}"
            )

        self._logger.debug("All parking lot invariants satisfied")

    # ========================================================================
    # PUBLIC BUSINESS METHODS
    # ========================================================================

    def park_car(self, car: Car, slot_number: Optional[int] = None) -> ParkingSlot:
        """
        Park a car in the given slot, or in the first free slot if none given
        Returns: the occupied ParkingSlot
        Raises: ValueError if the lot is full or the slot cannot take the car
        """
        if self.is_full():
            raise ValueError("Parking lot is full")

        if slot_number is None:
            slot = self.find_available_slot()
        else:
            slot = self.get_slot_by_number(slot_number)
            if slot is None:
                raise ValueError(f"Slot {slot_number} not found")

        if slot is None:
            raise ValueError("No available slot")

        slot.occupy(car)
        self._occupied_count += 1
        self._increment_version()
        self._validate_invariants()

        self._logger.info(f"Car {car} parked in slot {slot.number}")
        return slot

    def release_car(self, registration_number: str) -> Optional[Tuple[int, Car]]:
        """
        Release the first car (by slot number) with the given registration
        Returns: (slot_number, car) if found, None otherwise
        """
        slot = self.find_slot_by_registration(registration_number)
        if slot is None:
            return None

        car = slot.vacate()
        self._occupied_count -= 1
        self._increment_version()
        self._validate_invariants()

        self._logger.info(f"Car {car} left slot {slot.number}")
        return slot.number, car

    def find_available_slot(self) -> Optional[ParkingSlot]:
        """Find the lowest-numbered free slot"""
        for slot in self._slots:
            if not slot.is_occupied:
                return slot
        return None

    def find_slot_by_registration(self, registration_number: str) -> Optional[ParkingSlot]:
        """Find the lowest-numbered slot holding a car with this registration"""
        for slot in self._slots:
            if slot.holds(registration_number):
                return slot
        return None

    def get_slot_by_number(self, slot_number: int) -> Optional[ParkingSlot]:
        """Get slot by its number"""
        if 1 <= slot_number <= self._capacity:
            return self._slots[slot_number - 1]
        return None

    def occupied_slots(self) -> List[ParkingSlot]:
        """All occupied slots in ascending slot-number order"""
        return [slot for slot in self._slots if slot.is_occupied]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "capacity": self._capacity,
            "occupied_count": self._occupied_count,
            "available_count": self.available_count,
            "version": self._version,
            "slots": [slot.to_dict() for slot in self._slots],
        }

    def __repr__(self) -> str:
        return f"ParkingLot(capacity={self._capacity}, occupied={self._occupied_count})"
