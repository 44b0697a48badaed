"""Infrastructure layer - concrete stores, gateways and wiring."""
