#!/usr/bin/env python3
"""Write a deterministic media tree for manual runs and the smoke runner."""
from __future__ import annotations

import hashlib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
FX = ROOT / "fixtures"


def pattern_bytes(size: int, seed: str) -> bytes:
    """Deterministic, non-repeating-looking bytes so misplaced windows show up."""
    out = bytearray()
    counter = 0
    while len(out) < size:
        out += hashlib.blake2b(f"{seed}:{counter}".encode(), digest_size=64).digest()
        counter += 1
    return bytes(out[:size])


# 2.5 MiB spans several 1 MiB streaming chunks.
FILES = [
    (FX / "movie.mkv", pattern_bytes(5 * 512 * 1024, "movie")),
    (FX / "clip.mp4", pattern_bytes(64 * 1024 + 7, "clip")),
    (FX / "trailer.webm", pattern_bytes(4096, "trailer")),
    (FX / "series" / "S01E01.MKV", pattern_bytes(300_001, "s01e01")),
    (FX / "series" / "extras" / "behind the scenes.mov", pattern_bytes(12_345, "bts")),
    (FX / "empty.avi", b""),
    (FX / "notes.txt", b"not a video file\n"),
]


def main() -> None:
    FX.mkdir(parents=True, exist_ok=True)
    for path, data in FILES:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    created = [p for p, _ in FILES if p.exists()]
    print("Created fixtures:")
    for p in created:
        print(f" - {p.relative_to(ROOT)} ({p.stat().st_size} bytes)")
    if len(created) != len(FILES):
        raise SystemExit(f"Expected {len(FILES)} fixtures, found {len(created)}")


if __name__ == "__main__":
    main()
