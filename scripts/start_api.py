#!/usr/bin/env python3
"""Startup script for the Git DSL API server."""

import argparse
import os
import sys

try:
    import uvicorn
except ImportError:
    print("Error: uvicorn not installed. Run: pip install -e .")
    sys.exit(1)


def main():
    """Main entry point for API server."""
    parser = argparse.ArgumentParser(
        description="Start the Git DSL API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/start_api.py                          # Development server
  python scripts/start_api.py --repo /srv/repos/app    # Default repository for requests
  python scripts/start_api.py --host 0.0.0.0           # Listen on all interfaces
  python scripts/start_api.py --reload                 # Auto-reload on changes
  python scripts/start_api.py --line-separator '\\n'      # Join text views with LF
        """
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--repo",
        help="Repository used when a request has no repo_path (sets GITDSL_REPO_PATH)"
    )
    parser.add_argument(
        "--line-separator",
        help="Default separator for text views, escapes allowed (sets GITDSL_LINE_SEPARATOR)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)"
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

    if args.repo:
        repo_path = os.path.abspath(args.repo)
        if not os.path.exists(os.path.join(repo_path, ".git")):
            print(f"Error: {repo_path} is not a git checkout")
            sys.exit(1)
        os.environ["GITDSL_REPO_PATH"] = repo_path
    if args.line_separator:
        os.environ["GITDSL_LINE_SEPARATOR"] = args.line_separator
    # logging has no TRACE level
    os.environ["GITDSL_LOG_LEVEL"] = "DEBUG" if args.log_level == "trace" else args.log_level.upper()

    print("🚀 Starting Git DSL API server...")
    print(f"   Host: {args.host}")
    print(f"   Port: {args.port}")
    print(f"   Default repo: {os.environ.get('GITDSL_REPO_PATH', '-')}")
    print(f"   Line separator: {os.environ.get('GITDSL_LINE_SEPARATOR', 'OS default')}")
    print(f"   Workers: {args.workers}")
    print(f"   Reload: {args.reload}")
    print(f"   API Docs: http://{args.host}:{args.port}/docs")
    print()

    config = {
        "app": "gitdsl.api.app:app",
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }

    if args.reload:
        config["reload"] = True
        config["reload_dirs"] = ["src"]
    else:
        config["workers"] = args.workers

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
