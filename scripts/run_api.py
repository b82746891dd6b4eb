"""
Run FastAPI Server
==================

Script to start the ChurnGuard API server.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --port 8000 --reload
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn
from loguru import logger

from config import MissingCredentialError, get_api_key, get_config


def parse_args(api_config: dict):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run ChurnGuard API server")

    parser.add_argument(
        "--host",
        type=str,
        default=api_config.get("host", "0.0.0.0"),
        help="Host to bind to"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=api_config.get("port", 8000),
        help="Port to bind to"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=api_config.get("reload", False),
        help="Enable auto-reload"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of workers"
    )

    return parser.parse_args()


def main():
    """Run the API server."""
    config = get_config()
    args = parse_args(config.get("api", {}))

    # Fail before binding the port rather than inside the startup hook
    try:
        get_api_key(config)
    except MissingCredentialError as e:
        logger.error(str(e))
        sys.exit(1)

    models = config.get("inference", {}).get("models", {})

    print(f"""
    ╔═══════════════════════════════════════════════════╗
    ║       ChurnGuard API Server                       ║
    ╠═══════════════════════════════════════════════════╣
    ║  Host: {args.host:<15}                          ║
    ║  Port: {args.port:<15}                          ║
    ║  Reload: {str(args.reload):<13}                          ║
    ╠═══════════════════════════════════════════════════╣
    ║  Churn model:     {models.get('churn', '-'):<24}        ║
    ║  Portfolio model: {models.get('portfolio', '-'):<24}        ║
    ║  API Docs: http://localhost:{args.port}/docs            ║
    ╚═══════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "churnguard.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1
    )


if __name__ == "__main__":
    main()
