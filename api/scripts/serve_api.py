#!/usr/bin/env python3
"""Run the project catalog API locally.

Usage:
  python scripts/serve_api.py [--host 127.0.0.1] [--port 8000] [--reload]
"""

import argparse
import os
import sys

_api_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _api_dir)

import uvicorn
from dotenv import load_dotenv

load_dotenv(os.path.join(_api_dir, ".env"))


def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the project catalog API")
    ap.add_argument("--host", default=os.getenv("API_HOST", "127.0.0.1"))
    ap.add_argument("--port", type=int, default=int(os.getenv("API_PORT", "8000")))
    ap.add_argument("--reload", action="store_true")
    args = ap.parse_args()

    uvicorn.run("orgsite.main:app", host=args.host, port=args.port, reload=args.reload, app_dir=_api_dir)


if __name__ == "__main__":
    main()
