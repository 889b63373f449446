"""pump_core: session, progression and analytics engine for a three-day dumbbell programme."""

__version__ = "0.1.0"
