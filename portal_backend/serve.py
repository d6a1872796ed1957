"""
Run the API with uvicorn.

Usage:
    python -m portal_backend.serve

Reads HOST, PORT and LOG_LEVEL from the environment (or .env).
"""

import uvicorn

from portal_backend.core import config


def main() -> None:
    uvicorn.run(
        "portal_backend.main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
