"""Planning, rendering and execution components."""
