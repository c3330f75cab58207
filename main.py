"""Aether LLM - Entry Point.

Запускает FastAPI приложение через uvicorn.
"""

import uvicorn

from aether_llm.core.config import settings


def main() -> None:
    """Запустить Aether LLM."""
    uvicorn.run(
        "aether_llm.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.log.level.lower(),
        access_log=settings.debug,  # Access log только в debug
    )


if __name__ == "__main__":
    main()
