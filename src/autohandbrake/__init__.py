"""AutoHandBrake - batch HandBrake transcoding with automatic audio planning."""

__version__ = "0.1.0"
