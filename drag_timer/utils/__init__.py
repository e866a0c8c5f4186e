"""Utils package for Drag Timer.

This package contains logging configuration and the clock abstraction
shared across the application.
"""

from .clock import Clock, ScheduledCall

__all__ = [
    "Clock",
    "ScheduledCall",
]
