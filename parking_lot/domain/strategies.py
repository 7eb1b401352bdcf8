# File: parking_lot/domain/strategies.py
"""
Strategy Pattern Implementation for the Parking Lot Simulator

Encapsulates the two algorithms the lot depends on so they can be swapped
without touching the aggregate or the application service:
1. Parking Allocation Strategies - which free slot a new car gets
2. Pricing Strategies - what a car owes when it leaves
"""

from abc import ABC, abstractmethod
from typing import Optional
from decimal import Decimal
import logging

from .models import Car, Money, ParkingSlot
from .aggregates import ParkingLot


# ============================================================================
# STRATEGY INTERFACES
# ============================================================================

class ParkingStrategy(ABC):
    """
    Abstract base class for parking strategies
    Defines the interface for slot allocation algorithms
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def allocate_slot(self, parking_lot: ParkingLot, car: Car) -> Optional[ParkingSlot]:
        """
        Choose a slot for the given car
        Returns: ParkingSlot if available, None otherwise
        """
        pass

    def get_strategy_name(self) -> str:
        """Get human-readable strategy name"""
        return self.__class__.__name__.replace("Strategy", "")

    def __str__(self) -> str:
        return f"{self.get_strategy_name()} Strategy"


class PricingStrategy(ABC):
    """
    Abstract base class for pricing strategies
    Defines the interface for fee calculation algorithms
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def calculate_parking_fee(self, hours: int) -> Money:
        """
        Calculate parking fee for a stay of the given number of hours
        Returns: Calculated fee
        """
        pass


# ============================================================================
# PARKING ALLOCATION STRATEGIES
# ============================================================================

class NearestSlotStrategy(ParkingStrategy):
    """
    Strategy: Allocate the lowest-numbered free slot
    Slot 1 is nearest the entry, so a linear scan in slot-number order
    gives the nearest free slot.
    """

    def allocate_slot(self, parking_lot: ParkingLot, car: Car) -> Optional[ParkingSlot]:
        self.logger.debug(f"Finding nearest slot for {car}")
        return parking_lot.find_available_slot()


# ============================================================================
# PRICING STRATEGIES
# ============================================================================

class FlatThenHourlyPricingStrategy(PricingStrategy):
    """
    Flat charge for the first hours, then a fixed rate per extra hour

    With the defaults: 0-2 hours costs 10, and every hour past 2 adds 10,
    so 3 hours costs 20 and 5 hours costs 40.
    """

    def __init__(
        self,
        base_charge: Decimal = Decimal('10'),
        included_hours: int = 2,
        hourly_rate: Decimal = Decimal('10'),
        currency_symbol: str = "$"
    ):
        super().__init__()
        if base_charge < 0 or hourly_rate < 0:
            raise ValueError("Charges cannot be negative")
        if included_hours < 0:
            raise ValueError("Included hours cannot be negative")

        self.base_charge = Money(Decimal(str(base_charge)), currency_symbol)
        self.included_hours = included_hours
        self.hourly_rate = Money(Decimal(str(hourly_rate)), currency_symbol)

    def calculate_parking_fee(self, hours: int) -> Money:
        if hours <= self.included_hours:
            fee = self.base_charge
        else:
            fee = self.base_charge + self.hourly_rate * (hours - self.included_hours)

        self.logger.debug(f"Fee for {hours} hours: {fee.format()}")
        return fee
