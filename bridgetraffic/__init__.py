"""Six-lane bridge traffic simulation with lane changes, breakdowns, weather effects and statistics."""

__version__ = "0.1.0"