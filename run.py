"""
Application Runner

This script is the entry point for running the relay.
Use: python run.py
"""

import sys
from pathlib import Path

# Add project root to Python path to enable 'workplace_relay' imports
project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root))

import uvicorn

from workplace_relay.config import get_settings


def main():
    """Run the relay with uvicorn."""
    settings = get_settings()

    uvicorn.run(
        "workplace_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=settings.log_requests
    )


if __name__ == "__main__":
    main()
