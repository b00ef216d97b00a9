"""
Start the txselect API with uvicorn.

Usage:
    python scripts/run_server.py [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]

TXSELECT_NONCE_POLICY (strict or lenient) is read from the environment or .env.
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the txselect API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )
    args = parser.parse_args()

    uvicorn.run(
        "txselect.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
