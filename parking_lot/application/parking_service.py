# File: parking_lot/application/parking_service.py
"""
Parking Lot Application Service

The service is the parking lot manager: it owns the single lot of a run,
applies the allocation and pricing strategies, and exposes the use cases
the command layer calls:

1. Create the lot
2. Park a car
3. Release a car and bill it
4. Report occupancy

Failures are raised as ParkingServiceError subclasses whose message is the
text shown to the operator.
"""

from typing import Optional
from decimal import Decimal
import logging

from ..config import AppConfig, BillingConfig
from ..domain.models import Car, Money
from ..domain.aggregates import ParkingLot
from ..domain.strategies import (
    ParkingStrategy, PricingStrategy,
    NearestSlotStrategy, FlatThenHourlyPricingStrategy
)
from .dtos import (
    ParkingLotCreatedDTO, ParkingAllocationDTO, ParkingExitDTO,
    SlotStatusDTO, ParkingLotStatusDTO
)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ParkingServiceError(Exception):
    """Base exception for parking service errors"""
    pass


class LotNotCreatedError(ParkingServiceError):
    """Raised when an operation needs a lot that does not exist yet"""

    def __init__(self):
        super().__init__("Parking lot not created yet.")


class LotAlreadyCreatedError(ParkingServiceError):
    """Raised on a second create; the existing lot is left untouched"""

    def __init__(self):
        super().__init__("Parking lot already created.")


class InvalidCapacityError(ParkingServiceError):
    def __init__(self):
        super().__init__("Invalid capacity")


class InvalidHoursError(ParkingServiceError):
    def __init__(self):
        super().__init__("Invalid hours")


class VehicleValidationError(ParkingServiceError):
    """Exception for malformed registration numbers"""
    pass


class SlotAllocationError(ParkingServiceError):
    """Exception for slot allocation errors"""
    pass


class ParkingLotFullError(SlotAllocationError):
    """Exception when parking lot is full"""

    def __init__(self):
        super().__init__("Sorry, parking lot is full")


class VehicleNotFoundError(ParkingServiceError):
    """Raised when no parked car has the requested registration"""

    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__(f"Registration number {registration_number} not found")


# ============================================================================
# MAIN PARKING SERVICE
# ============================================================================

class ParkingService:
    """
    Main application service for the parking lot

    Holds at most one ParkingLot. The lot is created once per service and
    cannot be reset; further create requests are rejected.
    """

    def __init__(
        self,
        parking_strategy: Optional[ParkingStrategy] = None,
        pricing_strategy: Optional[PricingStrategy] = None
    ):
        self.logger = logging.getLogger(self.__class__.__name__)

        self.parking_strategy = parking_strategy or NearestSlotStrategy()
        self.pricing_strategy = pricing_strategy or FlatThenHourlyPricingStrategy()

        self._parking_lot: Optional[ParkingLot] = None

        # Statistics
        self.total_parking_sessions = 0
        self.total_revenue: Optional[Money] = None

        self.logger.info(
            f"ParkingService initialized with {self.parking_strategy} "
            f"and {self.pricing_strategy.__class__.__name__}"
        )

    @property
    def parking_lot(self) -> Optional[ParkingLot]:
        return self._parking_lot

    @property
    def is_lot_created(self) -> bool:
        return self._parking_lot is not None

    def _require_lot(self) -> ParkingLot:
        if self._parking_lot is None:
            self.logger.warning("Operation rejected: parking lot not created")
            raise LotNotCreatedError()
        return self._parking_lot

    # ========================================================================
    # USE CASES
    # ========================================================================

    def create_parking_lot(self, capacity: int) -> ParkingLotCreatedDTO:
        """
        Create the lot with `capacity` empty slots numbered 1..capacity

        Raises: LotAlreadyCreatedError, InvalidCapacityError
        """
        if self._parking_lot is not None:
            self.logger.warning(
                f"Rejected create_parking_lot({capacity}): lot already has "
                f"{self._parking_lot.capacity} slots"
            )
            raise LotAlreadyCreatedError()

        if capacity <= 0:
            self.logger.warning(f"Rejected non-positive capacity: {capacity}")
            raise InvalidCapacityError()

        self._parking_lot = ParkingLot(capacity)
        self.logger.info(f"Parking lot created with {capacity} slots")
        return ParkingLotCreatedDTO(capacity=capacity)

    def park_vehicle(self, registration_number: str) -> ParkingAllocationDTO:
        """
        Park a car in the slot chosen by the parking strategy

        Duplicate registrations are not checked; the same registration can
        occupy several slots.

        Raises: LotNotCreatedError, ParkingLotFullError, VehicleValidationError
        """
        parking_lot = self._require_lot()

        if parking_lot.is_full():
            self.logger.warning(f"Lot full, cannot park {registration_number}")
            raise ParkingLotFullError()

        try:
            car = Car(registration_number)
        except ValueError as e:
            raise VehicleValidationError(str(e)) from e

        slot = self.parking_strategy.allocate_slot(parking_lot, car)
        if slot is None:
            # Only reachable with a strategy that refuses free slots
            raise SlotAllocationError(f"No slot allocated for {registration_number}")

        parking_lot.park_car(car, slot.number)
        self.total_parking_sessions += 1

        return ParkingAllocationDTO(
            slot_number=slot.number,
            registration_number=car.registration_number
        )

    def exit_vehicle(self, registration_number: str, hours: int) -> ParkingExitDTO:
        """
        Release the first slot holding this registration and bill the stay

        Raises: LotNotCreatedError, InvalidHoursError, VehicleNotFoundError
        """
        parking_lot = self._require_lot()

        if hours < 0:
            self.logger.warning(f"Rejected negative hours for {registration_number}: {hours}")
            raise InvalidHoursError()

        if parking_lot.find_slot_by_registration(registration_number) is None:
            self.logger.warning(f"Registration {registration_number} not found")
            raise VehicleNotFoundError(registration_number)

        fee = self.pricing_strategy.calculate_parking_fee(hours)
        slot_number, car = parking_lot.release_car(registration_number)

        self.total_revenue = fee if self.total_revenue is None else self.total_revenue + fee
        self.logger.info(
            f"{car} left slot {slot_number} after {hours}h, charged {fee.format()}"
        )

        return ParkingExitDTO(
            registration_number=car.registration_number,
            slot_number=slot_number,
            hours=hours,
            charge=fee.amount,
            charge_display=fee.format()
        )

    def get_parking_lot_status(self) -> ParkingLotStatusDTO:
        """
        Snapshot of the lot with occupied slots in ascending order

        Raises: LotNotCreatedError
        """
        parking_lot = self._require_lot()

        return ParkingLotStatusDTO(
            capacity=parking_lot.capacity,
            occupied_count=parking_lot.occupied_count,
            available_count=parking_lot.available_count,
            occupied_slots=[
                SlotStatusDTO(
                    slot_number=slot.number,
                    registration_number=slot.registration_number
                )
                for slot in parking_lot.occupied_slots()
            ]
        )


# ============================================================================
# SERVICE FACTORY
# ============================================================================

class ParkingServiceFactory:
    """Factory for creating configured parking services"""

    @staticmethod
    def create_default_service() -> ParkingService:
        """Create service with the standard tariff"""
        return ParkingService()

    @staticmethod
    def create_service_with_config(config: AppConfig) -> ParkingService:
        """Create service with the tariff from application config"""
        return ParkingService(
            pricing_strategy=ParkingServiceFactory.create_pricing_strategy(config.billing)
        )

    @staticmethod
    def create_pricing_strategy(billing: BillingConfig) -> PricingStrategy:
        return FlatThenHourlyPricingStrategy(
            base_charge=Decimal(billing.base_charge),
            included_hours=billing.included_hours,
            hourly_rate=Decimal(billing.hourly_rate),
            currency_symbol=billing.currency_symbol
        )
