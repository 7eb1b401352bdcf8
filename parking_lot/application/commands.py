# File: parking_lot/application/commands.py
"""
Command Pattern Implementation for the Parking Lot Simulator

Each input line is decoded into one of a closed set of command objects,
which are then executed against the ParkingService. Commands turn service
outcomes, successful or not, into a CommandResult holding the text lines
to show the operator.

Command grammar (one per line, whitespace-delimited):

    create_parking_lot <capacity:int>
    park <registration:string>
    leave <registration:string> <hours:int>
    status

Extra trailing tokens are ignored. Blank lines decode to no command.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Type, Iterable, Iterator
from datetime import datetime
from dataclasses import dataclass, field
import logging
import re

from .parking_service import ParkingService, ParkingServiceError
from .dtos import ParkingLotStatusDTO


STATUS_HEADER = "Slot No. Registration No."
EMPTY_LOT_MESSAGE = "Parking lot is empty."

_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')


# ============================================================================
# PARSE ERRORS
# ============================================================================

class CommandParseError(Exception):
    """Base exception for lines that cannot be turned into a command"""
    pass


class UnknownCommandError(CommandParseError):
    """Raised for a verb outside the command registry"""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Unknown command: {line}")


class CommandUsageError(CommandParseError):
    """Raised when a command is missing required arguments"""
    pass


class InvalidArgumentError(CommandParseError):
    """Raised when a numeric argument is not an integer"""
    pass


def parse_integer(token: str) -> Optional[int]:
    """
    Parse an optionally signed run of ASCII digits
    Returns None for anything else (decimals, underscores, words)
    """
    if not _INTEGER_PATTERN.fullmatch(token):
        return None
    return int(token)


# ============================================================================
# COMMAND RESULT
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of executing (or failing to parse) one input line"""
    success: bool
    command_type: str
    output: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    executed_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def failure(cls, command_type: str, message: str) -> 'CommandResult':
        return cls(success=False, command_type=command_type, output=[message], error_message=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "command_type": self.command_type,
            "output": list(self.output),
            "error_message": self.error_message,
            "data": self.data,
            "executed_at": self.executed_at.isoformat()
        }


# ============================================================================
# COMMAND INTERFACES AND BASE CLASSES
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    Subclasses declare their verb in `name` and build themselves from the
    line's argument tokens in `from_arguments`.
    """

    name: str = ""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.executed_at: Optional[datetime] = None

    @classmethod
    @abstractmethod
    def from_arguments(cls, arguments: List[str]) -> 'Command':
        """
        Build the command from the tokens after the verb
        Raises: CommandUsageError, InvalidArgumentError
        """
        pass

    @abstractmethod
    def run(self, service: ParkingService) -> CommandResult:
        """Perform the operation; service errors propagate"""
        pass

    def execute(self, service: ParkingService) -> CommandResult:
        """
        Execute the command using the provided service
        Service errors become a failed result carrying the error text
        """
        self.logger.debug(f"Executing {self.get_description()}")
        self.executed_at = datetime.now()
        try:
            return self.run(service)
        except ParkingServiceError as e:
            return CommandResult.failure(self.name, str(e))

    def get_description(self) -> str:
        """Get human-readable command description"""
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get_description()!r})"


# ============================================================================
# PARKING COMMANDS
# ============================================================================

class CreateParkingLotCommand(Command):
    """Command: create the lot with a fixed number of slots"""

    name = "create_parking_lot"

    def __init__(self, capacity: int):
        super().__init__()
        self.capacity = capacity

    @classmethod
    def from_arguments(cls, arguments: List[str]) -> 'CreateParkingLotCommand':
        if len(arguments) < 1:
            raise CommandUsageError("Usage: create_parking_lot {capacity}")

        capacity = parse_integer(arguments[0])
        if capacity is None:
            raise InvalidArgumentError("Invalid capacity")
        return cls(capacity)

    def run(self, service: ParkingService) -> CommandResult:
        created = service.create_parking_lot(self.capacity)
        return CommandResult(
            success=True,
            command_type=self.name,
            output=[f"Created a parking lot with {created.capacity} slots"],
            data=created.to_dict()
        )

    def get_description(self) -> str:
        return f"{self.name} {self.capacity}"


class ParkCommand(Command):
    """Command: park a car in the nearest free slot"""

    name = "park"

    def __init__(self, registration_number: str):
        super().__init__()
        self.registration_number = registration_number

    @classmethod
    def from_arguments(cls, arguments: List[str]) -> 'ParkCommand':
        if len(arguments) < 1:
            raise CommandUsageError("Usage: park {car_number}")
        return cls(arguments[0])

    def run(self, service: ParkingService) -> CommandResult:
        allocation = service.park_vehicle(self.registration_number)
        return CommandResult(
            success=True,
            command_type=self.name,
            output=[f"Allocated slot number: {allocation.slot_number}"],
            data=allocation.to_dict()
        )

    def get_description(self) -> str:
        return f"{self.name} {self.registration_number}"


class LeaveCommand(Command):
    """Command: release a car and bill it for the given hours"""

    name = "leave"

    def __init__(self, registration_number: str, hours: int):
        super().__init__()
        self.registration_number = registration_number
        self.hours = hours

    @classmethod
    def from_arguments(cls, arguments: List[str]) -> 'LeaveCommand':
        if len(arguments) < 2:
            raise CommandUsageError("Usage: leave {car_number} {hours}")

        hours = parse_integer(arguments[1])
        if hours is None:
            raise InvalidArgumentError("Invalid hours")
        return cls(arguments[0], hours)

    def run(self, service: ParkingService) -> CommandResult:
        exit_info = service.exit_vehicle(self.registration_number, self.hours)
        message = (
            f"Registration number {exit_info.registration_number} "
            f"with Slot Number {exit_info.slot_number} "
            f"is free with Charge {exit_info.charge_display}"
        )
        return CommandResult(
            success=True,
            command_type=self.name,
            output=[message],
            data=exit_info.to_dict(mode="json")
        )

    def get_description(self) -> str:
        return f"{self.name} {self.registration_number} {self.hours}"


class StatusCommand(Command):
    """Command: list occupied slots"""

    name = "status"

    @classmethod
    def from_arguments(cls, arguments: List[str]) -> 'StatusCommand':
        return cls()

    def run(self, service: ParkingService) -> CommandResult:
        status = service.get_parking_lot_status()
        return CommandResult(
            success=True,
            command_type=self.name,
            output=format_status(status),
            data=status.to_dict()
        )


def format_status(status: ParkingLotStatusDTO) -> List[str]:
    """Render a status snapshot as output lines"""
    if status.is_empty:
        return [EMPTY_LOT_MESSAGE]

    lines = [STATUS_HEADER]
    for slot in status.occupied_slots:
        lines.append(f"{slot.slot_number} {slot.registration_number}")
    return lines


# ============================================================================
# COMMAND PARSER
# ============================================================================

class CommandParser:
    """Decodes raw input lines into command objects"""

    COMMANDS: Dict[str, Type[Command]] = {
        CreateParkingLotCommand.name: CreateParkingLotCommand,
        ParkCommand.name: ParkCommand,
        LeaveCommand.name: LeaveCommand,
        StatusCommand.name: StatusCommand,
    }

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse(self, line: str) -> Optional[Command]:
        """
        Parse one line

        Returns: Command instance, or None for a blank line
        Raises: CommandParseError subclasses for anything unusable
        """
        tokens = line.split()
        if not tokens:
            return None

        verb, arguments = tokens[0], tokens[1:]
        command_class = self.COMMANDS.get(verb)
        if command_class is None:
            self.logger.debug(f"Unknown verb {verb!r}")
            raise UnknownCommandError(line)

        command = command_class.from_arguments(arguments)
        self.logger.debug(f"Parsed {command!r}")
        return command


# ============================================================================
# COMMAND PROCESSOR
# ============================================================================

class CommandProcessor:
    """
    Runs commands against a service, one at a time in input order,
    keeping a bounded history of executed commands
    """

    def __init__(
        self,
        service: ParkingService,
        parser: Optional[CommandParser] = None,
        max_history_size: int = 1000
    ):
        self.service = service
        self.parser = parser or CommandParser()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.command_history: List[Command] = []
        self.max_history_size = max_history_size

        self.processed = 0
        self.failed = 0

    def process(self, command: Command) -> CommandResult:
        """
        Process a command

        Returns: Execution result
        """
        self.logger.info(f"Processing command: {command.get_description()}")

        try:
            result = command.execute(self.service)
        except Exception as e:
            self.logger.error(f"Error processing command {command!r}: {e}", exc_info=True)
            result = CommandResult.failure(command.name, f"Error: {e}")

        self._add_to_history(command)
        self._record(result)
        return result

    def process_line(self, line: str) -> Optional[CommandResult]:
        """
        Parse and process one raw line
        Returns None for blank lines
        """
        try:
            command = self.parser.parse(line)
        except CommandParseError as e:
            self.logger.warning(f"Could not parse {line!r}: {e}")
            result = CommandResult.failure("invalid", str(e))
            self._record(result)
            return result

        if command is None:
            return None
        return self.process(command)

    def process_lines(self, lines: Iterable[str]) -> Iterator[CommandResult]:
        """Process lines lazily, yielding a result per non-blank line"""
        for line in lines:
            result = self.process_line(line)
            if result is not None:
                yield result

    def get_history(self, limit: Optional[int] = None) -> List[str]:
        """Get descriptions of executed commands, oldest first"""
        history = self.command_history.copy()
        if limit is not None:
            history = history[-limit:] if limit > 0 else []
        return [command.get_description() for command in history]

    def clear_history(self):
        """Clear command history"""
        self.command_history.clear()

    def _record(self, result: CommandResult):
        self.processed += 1
        if not result.success:
            self.failed += 1

    def _add_to_history(self, command: Command):
        """Add command to history, respecting max size"""
        self.command_history.append(command)

        if len(self.command_history) > self.max_history_size:
            self.command_history = self.command_history[-self.max_history_size:]
