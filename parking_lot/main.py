# File: parking_lot/main.py
"""
Main application entry point for the Parking Lot Simulator

Reads commands from the file named on the command line, runs them against
a fresh parking lot and prints the result of each to stdout. Diagnostics go
through logging (stderr and an optional log file), never to stdout.

Exit codes: 0 after all lines are processed (a read error part way is
reported but still exits 0), 1 when the input file is missing or cannot be
opened, or the config file is invalid.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from .config import AppConfig, ConfigError, LoggingConfig, load_config
from .application.commands import CommandProcessor
from .application.parking_service import ParkingServiceFactory
from .infrastructure.command_sources import (
    CommandSource, FileCommandSource,
    CommandSourceOpenError, CommandSourceReadError
)
from .presentation.console import ConsoleView


def setup_logging(settings: LoggingConfig) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if settings.file is not None:
        log_dir = os.path.dirname(str(settings.file))
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(str(settings.file)))

    logging.basicConfig(
        level=getattr(logging, settings.level),
        format=settings.format,
        handlers=handlers,
        force=True
    )
    return logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parking-lot",
        description="Run parking lot commands from a file"
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        help="File with one command per line"
    )
    parser.add_argument(
        "--config",
        help="YAML configuration file (billing and logging settings)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level"
    )
    return parser


class ParkingApplication:
    """Main application controller that wires up all components"""

    def __init__(self, config: Optional[AppConfig] = None, output: Optional[TextIO] = None):
        self.config = config or AppConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

        # Dependency injection
        self.service = ParkingServiceFactory.create_service_with_config(self.config)
        self.processor = CommandProcessor(self.service)
        self.view = ConsoleView(output)

    def run(self, source: CommandSource) -> int:
        """Process every line from the source; returns the exit code"""
        self.logger.info("Processing commands...")

        try:
            for result in self.processor.process_lines(source.lines()):
                self.view.show_result(result)
        except CommandSourceReadError as e:
            self.view.show_message(f"Error reading file: {e}")
        finally:
            self.view.flush()

        self.logger.info(
            f"Processed {self.processor.processed} commands, "
            f"{self.processor.failed} rejected"
        )
        return 0

    def run_file(self, path: str) -> int:
        """Open the command file and run it; returns the exit code"""
        try:
            source = FileCommandSource(path)
        except CommandSourceOpenError as e:
            self.view.show_message(f"Error opening file: {e}")
            self.logger.error(f"Cannot open {path}: {e}")
            return 1

        with source:
            return self.run(source)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_arg_parser().parse_args(argv)

    if not args.input_file:
        print("Please provide a filename as a parameter.")
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error loading config: {e}")
        return 1

    if args.log_level:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": args.log_level})}
        )

    logger = setup_logging(config.logging)
    logger.info("Starting Parking Lot Simulator...")

    app = ParkingApplication(config)
    return app.run_file(args.input_file)


if __name__ == "__main__":
    sys.exit(main())
