"""
API Server Runner

Entry point for running the WeChat authentication API with uvicorn after
loading environment configuration and checking WeChat credentials.
"""

import argparse
import logging
import os
import sys
import traceback

import uvicorn
from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("api_runner")
credentials_logger = logging.getLogger("oauth_credentials")


def parse_arguments(argv=None):
    """Parse command line arguments for the API server."""
    parser = argparse.ArgumentParser(description="Run the WeChat authentication API server")

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server to (default: 8000)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    parser.add_argument(
        "--env",
        type=str,
        choices=["development", "testing", "production"],
        default="development",
        help="Environment to run in (default: development)"
    )

    return parser.parse_args(argv)


def verify_oauth_environment() -> bool:
    """
    Check that WeChat credentials are configured and log the outcome.

    Returns:
        True if both WECHAT_APPID and WECHAT_SECRET are set
    """
    app_id = os.environ.get("WECHAT_APPID")
    secret = os.environ.get("WECHAT_SECRET")

    if app_id and secret:
        masked_id = app_id[:4] + "..." + app_id[-4:] if len(app_id) > 8 else "***"
        credentials_logger.info(f"WeChat credentials configured for appid: {masked_id}")
        return True

    missing = [name for name, value in (("WECHAT_APPID", app_id), ("WECHAT_SECRET", secret)) if not value]
    credentials_logger.error(f"WeChat credentials missing: {', '.join(missing)}")
    credentials_logger.error("WeChat login will not work until they are set")
    return False


def main(argv=None):
    """Load configuration and run the API server."""
    args = parse_arguments(argv)

    load_dotenv()
    os.environ["ENVIRONMENT"] = args.env

    verify_oauth_environment()

    logger.info(f"Starting API server in {args.env} mode")
    logger.info(f"Server will be available at http://{args.host}:{args.port}")

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info" if args.env == "production" else "debug"
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error running server: {str(e)}")
        logger.error(traceback.format_exc())
        sys.exit(1)
