"""
Integration Tests Package for the Parking Lot Simulator

Integration tests drive the whole stack (command file → parser →
service → console output) and check the printed transcript.

Test Categories:
- End-to-end command files
- CLI argument and exit code handling
- Configuration wiring
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

# Add the project root to Python path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

__description__ = "Integration tests for the Parking Lot Simulator"

TEST_CATEGORIES = {
    "end_to_end": "Command file to printed transcript",
    "cli": "Argument handling and exit codes",
    "config": "YAML configuration wiring",
}


class IntegrationTestConfig:
    """Sample inputs shared by integration tests"""

    SAMPLE_SESSION = [
        "create_parking_lot 2",
        "park KA-01",
        "park KA-02",
        "park KA-03",
        "leave KA-01 4",
        "status",
    ]

    SAMPLE_SESSION_OUTPUT = [
        "Created a parking lot with 2 slots",
        "Allocated slot number: 1",
        "Allocated slot number: 2",
        "Sorry, parking lot is full",
        "Registration number KA-01 with Slot Number 1 is free with Charge $30",
        "Slot No. Registration No.",
        "2 KA-02",
    ]


class TestDataGenerator:
    """Writes command and config files into a scratch directory"""

    __test__ = False

    def __init__(self):
        self.temp_dir = tempfile.mkdtemp()

    def write_commands(self, lines, name="commands.txt"):
        path = os.path.join(self.temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return path

    def write_file(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def cleanup(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)
