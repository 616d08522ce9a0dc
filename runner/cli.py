from __future__ import annotations

import argparse
import os
from pathlib import Path


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Range server smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:32767"))
    parser.add_argument("--fixtures", default=str(Path(__file__).resolve().parents[1] / "fixtures"))
    parser.add_argument("--timeout", type=float, default=20.0, help="health wait in seconds")
    parser.add_argument("--parts", type=int, default=4, help="concurrent disjoint ranges per file")
    return parser.parse_args(argv)
