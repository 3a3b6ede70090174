"""Data models shared across AutoHandBrake components."""
