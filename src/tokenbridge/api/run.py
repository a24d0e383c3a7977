"""
tokenbridge REST API entry point.

Usage:
    python -m tokenbridge.api.run                      # Default port 8010
    TOKENBRIDGE_API_PORT=9000 python -m tokenbridge.api.run
    TOKENBRIDGE_DEV_MODE=1 python -m tokenbridge.api.run  # auto-reload
"""

import os

import uvicorn

DEFAULT_PORT = 8010
DEFAULT_HOST = "127.0.0.1"


def main():
    port = int(os.getenv("TOKENBRIDGE_API_PORT", DEFAULT_PORT))
    host = os.getenv("TOKENBRIDGE_API_HOST", DEFAULT_HOST)
    reload = os.getenv("TOKENBRIDGE_DEV_MODE", "").lower() in ("1", "true", "yes")

    print(f"Starting tokenbridge API on {host}:{port}")
    if reload:
        print("Development mode: auto-reload enabled")

    uvicorn.run(
        "tokenbridge.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
