"""API route handlers."""

from api.routes import health, verify, batches

__all__ = ["health", "verify", "batches"]
