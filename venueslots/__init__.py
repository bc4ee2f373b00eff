"""
venueslots - slot scheduling and availability engine for gaming venue bookings.
"""

__version__ = "0.1.0"
