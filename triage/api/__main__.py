"""Serve the triage API with uvicorn.

Usage:
    python -m triage.api

Environment Variables:
- TRIAGE_HOST: Bind address (default: 127.0.0.1)
- TRIAGE_PORT: Bind port (default: 8000)
"""

import os

import uvicorn


def main() -> None:
    """Run the API server."""
    uvicorn.run(
        "triage.api.main:app",
        host=os.environ.get("TRIAGE_HOST", "127.0.0.1"),
        port=int(os.environ.get("TRIAGE_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
