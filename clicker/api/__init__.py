"""Share server API."""
