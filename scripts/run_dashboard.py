"""
Run Streamlit Dashboard
=======================

Script to start the ChurnGuard Streamlit dashboard.

Usage:
    python scripts/run_dashboard.py
    python scripts/run_dashboard.py --port 8501
"""

import argparse
import subprocess
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger

from config import MissingCredentialError, get_api_key, get_config


def parse_args(dashboard_config: dict):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run ChurnGuard Streamlit dashboard")

    parser.add_argument(
        "--port",
        type=int,
        default=dashboard_config.get("port", 8501),
        help="Port to run on"
    )
    parser.add_argument(
        "--browser",
        action="store_true",
        help="Open browser automatically"
    )

    return parser.parse_args()


def main():
    """Run the dashboard."""
    config = get_config()
    args = parse_args(config.get("dashboard", {}))

    try:
        get_api_key(config)
    except MissingCredentialError as e:
        logger.error(str(e))
        sys.exit(1)

    dashboard_path = project_root / "churnguard" / "dashboard" / "app.py"

    print(f"""
    ╔═══════════════════════════════════════════════════╗
    ║       ChurnGuard Dashboard                        ║
    ╠═══════════════════════════════════════════════════╣
    ║  URL: http://localhost:{args.port}                      ║
    ╚═══════════════════════════════════════════════════╝
    """)

    cmd = [
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path),
        "--server.port", str(args.port),
        "--server.headless", str(not args.browser).lower(),
    ]

    subprocess.run(cmd, check=False)


if __name__ == "__main__":
    main()
