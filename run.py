#!/usr/bin/env python3
"""
Run the Makler CRM web server.
"""

import uvicorn

from utils.config import Config
from utils.log_config import setup_logging


def main():
    """Start the web server."""
    config = Config.load()
    setup_logging(config.log_level)

    print(f"Starting Makler CRM on http://{config.host}:{config.port}")
    print(f"Storage backend: {config.storage_backend} ({config.storage_base_path})")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
