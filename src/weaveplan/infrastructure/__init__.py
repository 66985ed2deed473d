"""Infrastructure layer — host-facing adapters (type resolution)."""
