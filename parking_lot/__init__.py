"""
Parking Lot Simulator

Creates a single-level lot of fixed capacity, admits and releases cars,
bills on release and reports occupancy, driven by line-oriented commands.
"""

__version__ = "1.0.0"
