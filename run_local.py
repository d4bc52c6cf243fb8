#!/usr/bin/env python3
"""
Local development server runner.

Runs the Push Relay API using uvicorn for local development.

Usage:
    python run_local.py
    python run_local.py --port 8000
    python run_local.py --reload  # Auto-reload on code changes
"""

import argparse
from pathlib import Path

import uvicorn

project_root = Path(__file__).parent


def main():
    parser = argparse.ArgumentParser(
        description="Run the Push Relay API locally with uvicorn"
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
        help="Enable auto-reload on code changes"
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
    if not env_file.exists():
        print("WARNING: .env file not found, using environment variables and defaults.")
        print("Useful settings:")
        print("  - MESSAGES_TABLE_NAME")
        print("  - AWS_REGION")
        print("  - METRICS_ENABLED")

    print("=" * 60)
    print("Starting Push Relay API (Local Development)")
    print("=" * 60)
    print(f"Server: http://{args.host}:{args.port}")
    print(f"API Docs: http://{args.host}:{args.port}/docs")
    print(f"Health: http://{args.host}:{args.port}/health")
    print("=" * 60)
    if args.reload:
        print("Auto-reload: ENABLED (code changes will restart server)")
    print()

    # Stay in project root so .env file loads correctly
    uvicorn.run(
        "push_relay.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=[str(project_root / "src")] if args.reload else None
    )


if __name__ == "__main__":
    main()
