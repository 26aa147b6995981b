#!/usr/bin/env python3
"""
Todo Server Runner

Start the FastAPI server with configurable options.

Usage:
    python run_server.py                    # Start with defaults (Settings: PORT env, .env or 8080)
    python run_server.py --reload           # Start with hot-reload
    python run_server.py --port 8888        # Start on custom port
    python run_server.py --host 0.0.0.0     # Bind to all interfaces
"""

import argparse
import subprocess
import sys


def check_dependencies() -> tuple[bool, list[str]]:
    """Check if required dependencies are installed."""
    missing = []

    try:
        import todo_server  # noqa: F401
    except ImportError:
        missing.append("todo_server (install with: pip install -e .)")

    try:
        import uvicorn  # noqa: F401
    except ImportError:
        missing.append("uvicorn (install with: pip install uvicorn[standard])")

    return len(missing) == 0, missing


def build_command(args: argparse.Namespace) -> list[str]:
    """Build the uvicorn command line for the parsed arguments."""
    cmd = [
        "uvicorn",
        "todo_server.main:create_default_app",
        "--factory",
        "--host", args.host,
        "--port", str(args.port),
        "--log-level", args.log_level,
    ]

    if args.workers is not None:
        cmd.extend(["--workers", str(args.workers)])
    elif args.reload:
        cmd.append("--reload")
    return cmd


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse launcher options; defaults come from the application settings."""
    from todo_server.core.config import get_settings

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Start the todo FastAPI server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--host",
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable hot-reload (development only)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL.lower(),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help=f"Logging level (default: {settings.LOG_LEVEL.lower()})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (production only)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the server with specified configuration."""
    deps_ok, missing = check_dependencies()
    if not deps_ok:
        print("\033[0;31mError: Missing required dependencies:\033[0m")
        for dep in missing:
            print(f"  - {dep}")
        return 1

    args = parse_args(argv)

    if args.workers is not None and args.reload:
        print("\033[1;33mWarning: --workers specified, disabling hot-reload\033[0m")

    cmd = build_command(args)

    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Hot-reload: {args.reload and args.workers is None}")
    print(f"Log level: {args.log_level}")
    if args.workers:
        print(f"Workers: {args.workers}")
    print(f"Access the app at http://localhost:{args.port}")
    print()

    try:
        subprocess.run(cmd, check=True)
        return 0
    except KeyboardInterrupt:
        print("\n\033[1;33mServer stopped by user\033[0m")
        return 0
    except subprocess.CalledProcessError as e:
        print(f"\033[0;31mError: Server exited with code {e.returncode}\033[0m")
        return e.returncode


if __name__ == "__main__":
    sys.exit(main())
