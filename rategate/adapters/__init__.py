"""Adapters to external collaborators (storage backends)."""
