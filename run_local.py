#!/usr/bin/env python3
"""
Local development server runner.

Runs the webhook relay with uvicorn against the DynamoDB table named
by SUBSCRIPTIONS_TABLE_NAME (point AWS_ENDPOINT_URL_DYNAMODB at a
local DynamoDB to avoid touching AWS).

Usage:
    python run_local.py
    python run_local.py --port 8000
    python run_local.py --reload  # Auto-reload on code changes
"""

import argparse
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent

try:
    import uvicorn
except ImportError:
    print("ERROR: uvicorn is not installed.")
    print("Please install dependencies: pip install -e '.[dev]'")
    sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description="Run the webhook relay locally with uvicorn"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (recommended for development)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn (default: info)"
    )

    args = parser.parse_args()

    env_file = project_root / ".env"
    if not env_file.exists() and "SIGNING_SECRET" not in os.environ:
        print("ERROR: SIGNING_SECRET is not set and no .env file was found.")
        print("Environment variables:")
        print("  - SIGNING_SECRET (required)")
        print("  - SUBSCRIPTIONS_TABLE_NAME")
        print("  - MAX_FAILURE_COUNT")
        sys.exit(1)

    print("=" * 60)
    print("Starting Webhook Relay (Local Development)")
    print("=" * 60)
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Subscriptions: http://{args.host}:{args.port}/@subscriptions")
    print(f"Health: http://{args.host}:{args.port}/health")
    print("=" * 60)
    if args.reload:
        print("Auto-reload: ENABLED (code changes will restart server)")
    print()

    # Stay in project root so the .env file loads
    uvicorn.run(
        "webhook_relay.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=[str(project_root / "src")] if args.reload else None
    )


if __name__ == "__main__":
    main()
