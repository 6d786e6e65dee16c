"""
Run script for starting the RTC agent backend proxy.

This script validates the vendor configuration and starts the FastAPI server.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import os
import sys
from pathlib import Path

import dotenv
import uvicorn

from rtc_agent.config.logging_config import configure_logging
from rtc_agent.config.settings import VendorSettings
from rtc_agent.errors import ConfigurationError

env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

# Configure logging
logger = configure_logging()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Start the RTC agent backend proxy")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8080")),
        help="Port to run the server on (default: 8080 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args()


def main():
    """Main entry point for starting the server."""
    args = parse_args()

    # Missing credentials are fatal before the server binds
    try:
        settings = VendorSettings.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        print("Set RTC_APP_ID, RTC_SERVER_SECRET and RTC_API_BASE_URL (or add them to .env)")
        sys.exit(1)

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"Log level: {args.log_level}")
    logger.info(f"Vendor API: {settings.api_base_url} (app {settings.app_id})")
    logger.info(f"Callbacks URL: http://{args.host}:{args.port}/api/callbacks")

    uvicorn.run(
        "rtc_agent.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        http="h11",
        access_log=False,
        reload=os.getenv("ENV", "production").lower() == "development",
    )


if __name__ == "__main__":
    main()
