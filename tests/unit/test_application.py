#!/usr/bin/env python3
"""
Application Layer Unit Tests

Tests for the ParkingService, command parsing, command execution and the
command processor. Collaborators are mocked where the test is about the
calling side only.
"""

import unittest
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent.parent))

from parking_lot.config import AppConfig, BillingConfig
from parking_lot.application.parking_service import (
    ParkingService, ParkingServiceFactory, ParkingServiceError,
    LotNotCreatedError, LotAlreadyCreatedError, InvalidCapacityError,
    InvalidHoursError, ParkingLotFullError, VehicleNotFoundError,
    VehicleValidationError, SlotAllocationError
)
from parking_lot.application.commands import (
    CommandParser, CommandProcessor, CommandResult,
    CreateParkingLotCommand, ParkCommand, LeaveCommand, StatusCommand,
    UnknownCommandError, CommandUsageError, InvalidArgumentError,
    parse_integer, format_status
)
from parking_lot.application.dtos import (
    ParkingAllocationDTO, ParkingExitDTO, ParkingLotStatusDTO, SlotStatusDTO
)


# ============================================================================
# PARKING SERVICE TESTS
# ============================================================================

class TestParkingService(unittest.TestCase):
    """Unit tests for ParkingService"""

    def setUp(self):
        self.service = ParkingService()

    def test_operations_before_create_rejected(self):
        with self.assertRaises(LotNotCreatedError):
            self.service.park_vehicle("KA-01")
        with self.assertRaises(LotNotCreatedError):
            self.service.exit_vehicle("KA-01", 1)
        with self.assertRaises(LotNotCreatedError):
            self.service.get_parking_lot_status()
        self.assertFalse(self.service.is_lot_created)

    def test_create_parking_lot(self):
        created = self.service.create_parking_lot(6)
        self.assertEqual(created.capacity, 6)
        self.assertEqual(self.service.parking_lot.capacity, 6)

    def test_second_create_rejected_without_reset(self):
        self.service.create_parking_lot(2)
        self.service.park_vehicle("KA-01")

        with self.assertRaises(LotAlreadyCreatedError) as ctx:
            self.service.create_parking_lot(5)
        self.assertEqual(str(ctx.exception), "Parking lot already created.")

        status = self.service.get_parking_lot_status()
        self.assertEqual(status.capacity, 2)
        self.assertEqual(status.occupied_slots[0].registration_number, "KA-01")

    def test_non_positive_capacity_rejected(self):
        for capacity in (0, -3):
            with self.assertRaises(InvalidCapacityError):
                self.service.create_parking_lot(capacity)
        self.assertFalse(self.service.is_lot_created)

    def test_fill_lot_then_full(self):
        self.service.create_parking_lot(3)
        slots = [self.service.park_vehicle(f"CAR-{i}").slot_number for i in range(3)]
        self.assertEqual(slots, [1, 2, 3])

        with self.assertRaises(ParkingLotFullError) as ctx:
            self.service.park_vehicle("CAR-X")
        self.assertEqual(str(ctx.exception), "Sorry, parking lot is full")
        self.assertIsInstance(ctx.exception, SlotAllocationError)
        self.assertEqual(self.service.get_parking_lot_status().occupied_count, 3)

    def test_exit_charges(self):
        self.service.create_parking_lot(1)
        for hours, expected in ((1, Decimal('10')), (3, Decimal('20')), (5, Decimal('40'))):
            self.service.park_vehicle("KA-01")
            exit_info = self.service.exit_vehicle("KA-01", hours)
            self.assertEqual(exit_info.charge, expected)
            self.assertEqual(exit_info.slot_number, 1)
        self.assertEqual(self.service.total_revenue.amount, Decimal('70'))
        self.assertEqual(self.service.total_parking_sessions, 3)

    def test_exit_charge_for_huge_hours_is_exact(self):
        self.service.create_parking_lot(1)
        self.service.park_vehicle("A")
        exit_info = self.service.exit_vehicle("A", 10 ** 30)
        self.assertEqual(exit_info.charge, Decimal(10 ** 31 - 10))
        self.assertEqual(exit_info.charge_display, f"${10 ** 31 - 10}")

    def test_exit_reallocates_freed_slot_first(self):
        self.service.create_parking_lot(3)
        for reg in ("A", "B", "C"):
            self.service.park_vehicle(reg)
        self.service.exit_vehicle("A", 1)
        self.service.exit_vehicle("C", 1)

        self.assertEqual(self.service.park_vehicle("D").slot_number, 1)

    def test_exit_unknown_registration(self):
        self.service.create_parking_lot(1)
        with self.assertRaises(VehicleNotFoundError) as ctx:
            self.service.exit_vehicle("NOPE", 2)
        self.assertEqual(str(ctx.exception), "Registration number NOPE not found")

    def test_exit_negative_hours_rejected(self):
        self.service.create_parking_lot(1)
        self.service.park_vehicle("KA-01")
        with self.assertRaises(InvalidHoursError):
            self.service.exit_vehicle("KA-01", -1)
        self.assertEqual(self.service.get_parking_lot_status().occupied_count, 1)

    def test_exit_zero_hours_is_flat_charge(self):
        self.service.create_parking_lot(1)
        self.service.park_vehicle("KA-01")
        self.assertEqual(self.service.exit_vehicle("KA-01", 0).charge_display, "$10")

    def test_duplicate_registration_allowed(self):
        self.service.create_parking_lot(2)
        self.service.park_vehicle("DUP")
        self.assertEqual(self.service.park_vehicle("DUP").slot_number, 2)
        self.assertEqual(self.service.exit_vehicle("DUP", 1).slot_number, 1)

    def test_invalid_registration_rejected(self):
        self.service.create_parking_lot(1)
        with self.assertRaises(VehicleValidationError):
            self.service.park_vehicle("")

    def test_status_lists_occupied_slots(self):
        self.service.create_parking_lot(3)
        status = self.service.get_parking_lot_status()
        self.assertTrue(status.is_empty)

        self.service.park_vehicle("A")
        self.service.park_vehicle("B")
        self.service.exit_vehicle("A", 1)

        status = self.service.get_parking_lot_status()
        self.assertEqual(
            [(s.slot_number, s.registration_number) for s in status.occupied_slots],
            [(2, "B")]
        )
        self.assertEqual(status.available_count, 2)

    def test_strategy_refusing_slot_raises(self):
        strategy = Mock()
        strategy.allocate_slot.return_value = None
        service = ParkingService(parking_strategy=strategy)
        service.create_parking_lot(1)
        with self.assertRaises(SlotAllocationError):
            service.park_vehicle("A")

    def test_factory_uses_configured_tariff(self):
        config = AppConfig(billing=BillingConfig(base_charge=Decimal('4'), hourly_rate=Decimal('1')))
        service = ParkingServiceFactory.create_service_with_config(config)
        service.create_parking_lot(1)
        service.park_vehicle("A")
        self.assertEqual(service.exit_vehicle("A", 5).charge, Decimal('7'))

    def test_exponent_config_value_displays_plainly(self):
        config = AppConfig(billing=BillingConfig(base_charge="1e1"))
        service = ParkingServiceFactory.create_service_with_config(config)
        service.create_parking_lot(1)
        service.park_vehicle("A")
        self.assertEqual(service.exit_vehicle("A", 1).charge_display, "$10")

    def test_default_factory_service(self):
        service = ParkingServiceFactory.create_default_service()
        service.create_parking_lot(1)
        service.park_vehicle("A")
        self.assertEqual(service.exit_vehicle("A", 4).charge_display, "$30")
        self.assertEqual(service.total_parking_sessions, 1)


# ============================================================================
# COMMAND PARSER TESTS
# ============================================================================

class TestParseInteger(unittest.TestCase):

    def test_valid_integers(self):
        for token, expected in (("12", 12), ("+5", 5), ("-3", -3), ("007", 7)):
            self.assertEqual(parse_integer(token), expected)

    def test_invalid_integers(self):
        for token in ("1.5", "1_000", "abc", "", "+", "٣"):
            self.assertIsNone(parse_integer(token), msg=f"token={token!r}")


class TestCommandParser(unittest.TestCase):
    """Unit tests for CommandParser"""

    def setUp(self):
        self.parser = CommandParser()

    def test_blank_lines_produce_no_command(self):
        for line in ("", "   ", "\t"):
            self.assertIsNone(self.parser.parse(line))

    def test_parse_each_verb(self):
        command = self.parser.parse("create_parking_lot 6")
        self.assertIsInstance(command, CreateParkingLotCommand)
        self.assertEqual(command.capacity, 6)

        command = self.parser.parse("park KA-01-HH-1234")
        self.assertIsInstance(command, ParkCommand)
        self.assertEqual(command.registration_number, "KA-01-HH-1234")

        command = self.parser.parse("leave KA-01-HH-1234 4")
        self.assertIsInstance(command, LeaveCommand)
        self.assertEqual((command.registration_number, command.hours), ("KA-01-HH-1234", 4))

        self.assertIsInstance(self.parser.parse("status"), StatusCommand)

    def test_surrounding_whitespace_ignored(self):
        command = self.parser.parse("   park   KA-01   ")
        self.assertEqual(command.registration_number, "KA-01")

    def test_extra_arguments_ignored(self):
        command = self.parser.parse("park KA-01 extra")
        self.assertEqual(command.registration_number, "KA-01")

    def test_unknown_command_echoes_line(self):
        with self.assertRaises(UnknownCommandError) as ctx:
            self.parser.parse("fly away")
        self.assertEqual(str(ctx.exception), "Unknown command: fly away")

    def test_verbs_are_case_sensitive(self):
        with self.assertRaises(UnknownCommandError):
            self.parser.parse("STATUS")

    def test_usage_errors(self):
        test_cases = [
            ("create_parking_lot", "Usage: create_parking_lot {capacity}"),
            ("park", "Usage: park {car_number}"),
            ("leave KA-01", "Usage: leave {car_number} {hours}"),
            ("leave", "Usage: leave {car_number} {hours}"),
        ]
        for line, message in test_cases:
            with self.assertRaises(CommandUsageError) as ctx:
                self.parser.parse(line)
            self.assertEqual(str(ctx.exception), message)

    def test_invalid_numbers(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            self.parser.parse("create_parking_lot six")
        self.assertEqual(str(ctx.exception), "Invalid capacity")

        with self.assertRaises(InvalidArgumentError) as ctx:
            self.parser.parse("leave KA-01 two")
        self.assertEqual(str(ctx.exception), "Invalid hours")


# ============================================================================
# COMMAND EXECUTION TESTS
# ============================================================================

class TestCommands(unittest.TestCase):
    """Unit tests for individual commands"""

    def setUp(self):
        self.service = ParkingService()

    def test_create_output(self):
        result = CreateParkingLotCommand(6).execute(self.service)
        self.assertTrue(result.success)
        self.assertEqual(result.output, ["Created a parking lot with 6 slots"])
        self.assertEqual(result.data, {"capacity": 6})

    def test_park_output(self):
        CreateParkingLotCommand(1).execute(self.service)
        result = ParkCommand("KA-01").execute(self.service)
        self.assertEqual(result.output, ["Allocated slot number: 1"])

    def test_leave_output(self):
        CreateParkingLotCommand(1).execute(self.service)
        ParkCommand("KA-01").execute(self.service)
        result = LeaveCommand("KA-01", 4).execute(self.service)
        self.assertEqual(
            result.output,
            ["Registration number KA-01 with Slot Number 1 is free with Charge $30"]
        )
        self.assertEqual(result.data["charge"], "30")

    def test_service_errors_become_failed_results(self):
        result = ParkCommand("KA-01").execute(self.service)
        self.assertFalse(result.success)
        self.assertEqual(result.output, ["Parking lot not created yet."])
        self.assertEqual(result.error_message, "Parking lot not created yet.")

    def test_status_output(self):
        CreateParkingLotCommand(2).execute(self.service)
        self.assertEqual(StatusCommand().execute(self.service).output, ["Parking lot is empty."])

        ParkCommand("KA-01").execute(self.service)
        self.assertEqual(
            StatusCommand().execute(self.service).output,
            ["Slot No. Registration No.", "1 KA-01"]
        )

    def test_format_status(self):
        status = ParkingLotStatusDTO(
            capacity=3,
            occupied_count=2,
            available_count=1,
            occupied_slots=[
                SlotStatusDTO(slot_number=1, registration_number="A"),
                SlotStatusDTO(slot_number=3, registration_number="C"),
            ]
        )
        self.assertEqual(format_status(status), ["Slot No. Registration No.", "1 A", "3 C"])

    def test_descriptions(self):
        self.assertEqual(LeaveCommand("A", 2).get_description(), "leave A 2")
        self.assertEqual(StatusCommand().get_description(), "status")


# ============================================================================
# COMMAND PROCESSOR TESTS
# ============================================================================

class TestCommandProcessor(unittest.TestCase):
    """Unit tests for CommandProcessor"""

    def setUp(self):
        self.processor = CommandProcessor(ParkingService())

    def test_blank_line_returns_none(self):
        self.assertIsNone(self.processor.process_line(""))
        self.assertEqual(self.processor.processed, 0)

    def test_parse_error_becomes_failed_result(self):
        result = self.processor.process_line("dance")
        self.assertFalse(result.success)
        self.assertEqual(result.output, ["Unknown command: dance"])
        self.assertEqual(self.processor.failed, 1)

    def test_process_lines_skips_blank_lines(self):
        results = list(self.processor.process_lines(["create_parking_lot 1", "", "park A"]))
        self.assertEqual([r.output for r in results], [
            ["Created a parking lot with 1 slots"],
            ["Allocated slot number: 1"],
        ])

    def test_unexpected_errors_are_reported(self):
        command = Mock()
        command.name = "park"
        command.get_description.return_value = "park A"
        command.execute.side_effect = RuntimeError("boom")

        result = self.processor.process(command)
        self.assertFalse(result.success)
        self.assertEqual(result.output, ["Error: boom"])

    def test_history(self):
        self.processor.process_line("create_parking_lot 2")
        self.processor.process_line("park A")
        self.processor.process_line("park")
        self.assertEqual(self.processor.get_history(), ["create_parking_lot 2", "park A"])
        self.assertEqual(self.processor.get_history(limit=1), ["park A"])
        self.assertEqual(self.processor.get_history(limit=0), [])

        self.processor.clear_history()
        self.assertEqual(self.processor.get_history(), [])

    def test_history_is_bounded(self):
        processor = CommandProcessor(ParkingService(), max_history_size=2)
        for line in ("create_parking_lot 3", "park A", "park B", "status"):
            processor.process_line(line)
        self.assertEqual(processor.get_history(), ["park B", "status"])

    def test_result_to_dict(self):
        result = CommandResult.failure("invalid", "Invalid hours")
        data = result.to_dict()
        self.assertFalse(data["success"])
        self.assertEqual(data["output"], ["Invalid hours"])
        self.assertIn("executed_at", data)

    def test_service_error_hierarchy(self):
        for error in (LotNotCreatedError(), ParkingLotFullError(), VehicleNotFoundError("A")):
            self.assertIsInstance(error, ParkingServiceError)


# ============================================================================
# DTO TESTS
# ============================================================================

class TestDTOs(unittest.TestCase):
    """Serialization helpers shared by all DTOs"""

    def test_exit_dto_json_and_dict(self):
        exit_info = ParkingExitDTO(
            registration_number="KA-01",
            slot_number=1,
            hours=4,
            charge=Decimal('30'),
            charge_display="$30"
        )

        restored = ParkingExitDTO.from_json(exit_info.to_json())
        self.assertEqual(restored, exit_info)
        self.assertEqual(ParkingExitDTO.from_dict(exit_info.to_dict()), exit_info)

    def test_status_dto_from_dict_builds_nested_slots(self):
        status = ParkingLotStatusDTO.from_dict({
            "capacity": 2,
            "occupied_count": 1,
            "available_count": 1,
            "occupied_slots": [{"slot_number": 2, "registration_number": "KA-02"}],
        })
        self.assertEqual(status.occupied_slots[0], SlotStatusDTO(slot_number=2, registration_number="KA-02"))
        self.assertFalse(status.is_empty)
        self.assertFalse(status.is_full)

    def test_to_dict_exclude_none(self):
        dto = ParkingAllocationDTO(slot_number=1, registration_number="A")
        self.assertEqual(dto.to_dict(exclude_none=True), {"slot_number": 1, "registration_number": "A"})


if __name__ == "__main__":
    unittest.main(verbosity=2)
