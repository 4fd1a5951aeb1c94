"""Path resolution and forwarding-table synthesis."""
