from __future__ import annotations

import argparse
from typing import Optional

from .app import serve


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the bfoc translation API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Restart the server when sources change")
    args = parser.parse_args(argv)
    serve(args.host, args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
