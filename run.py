#!/usr/bin/env python3
"""
Launch the cycling profile service under uvicorn.

Serves the Strava OAuth endpoints, the /api/profile stats API and the
login and dashboard pages from one process.
"""

import argparse
import sys
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="Run the Strava Cycling Profile backend")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level (default: info)"
    )

    args = parser.parse_args()

    if not Path(".env").exists():
        print("Warning: .env file not found.")
        print("Copy .env.example to .env and set STRAVA_CLIENT_ID, STRAVA_CLIENT_SECRET and STRAVA_REDIRECT_URI.")
        print("Get your credentials at: https://www.strava.com/settings/api")
        print()

    print("Starting Strava Cycling Profile backend...")
    print(f"Login page: http://{args.host}:{args.port}/")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print(f"OAuth start: http://{args.host}:{args.port}/auth/strava")
    print()

    import uvicorn
    try:
        uvicorn.run(
            "cycling_profile.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level,
            access_log=True
        )
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
