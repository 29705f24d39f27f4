"""
Parish Booker storage gateway.

Async persistence facade for users, rooms, bookings and app configuration
of the parish room-booking prototype.
"""

__version__ = "1.0.0"
