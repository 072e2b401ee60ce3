#!/usr/bin/env python
"""
Run the freight rates HTTP API.

Usage:
    python scripts/run_api.py [--port 8000] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Start the Freight Rates API (uvicorn)")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # Run from a checkout without installing
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    cmd = [
        sys.executable, "-m", "uvicorn",
        "freight_rates.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting Freight Rates API on {args.host}:{args.port}...")
    try:
        subprocess.run(cmd, env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
