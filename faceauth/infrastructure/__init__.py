"""Infrastructure layer: storage backends and FastAPI dependency providers."""
