"""Main entry point for Trek application."""

import argparse
import os


def main() -> None:
    """Run the Trek application with uvicorn."""
    import uvicorn

    from trek.config import config

    parser = argparse.ArgumentParser(description="Run the Trek web server.")
    parser.add_argument(
        "--host",
        default=os.getenv("BIND_HOST", "127.0.0.1"),
        help="Interface to bind (default: $BIND_HOST or 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("BIND_PORT", str(config.PORT))),
        help=f"Port to listen on (default: $BIND_PORT or {config.PORT})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=config.DEBUG,
        help="Restart on code changes (default on when DEBUG=true)",
    )
    args = parser.parse_args()

    uvicorn.run(
        "trek.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
