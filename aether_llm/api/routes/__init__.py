"""API Routes."""

from aether_llm.api.routes import health, llm

__all__ = ["health", "llm"]
