"""Infrastructure layer: filesystem, orchestration tool, and network probes."""
