"""HTML index of the video files below the media root."""
from __future__ import annotations

import os
from dataclasses import dataclass
from html import escape
from pathlib import Path
from urllib.parse import quote

from ..domain.media import is_video

__all__ = ["ListedFile", "collect_videos", "render_listing"]


@dataclass(frozen=True)
class ListedFile:
    name: str  # POSIX path relative to the root
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1024.0 / 1024.0


def collect_videos(root: Path) -> list[ListedFile]:
    """Walk `root` and return its video files sorted by relative path.

    Unreadable entries and links resolving outside the root are skipped;
    symlinked directories are not followed.
    """
    root = root.resolve()
    found: list[ListedFile] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for fname in filenames:
            full = Path(dirpath) / fname
            if not is_video(full):
                continue
            try:
                # Links out of the root would only 403 when followed.
                if not full.resolve().is_relative_to(root):
                    continue
                st = full.stat()
            except (OSError, RuntimeError):
                continue
            found.append(
                ListedFile(name=full.relative_to(root).as_posix(), size_bytes=st.st_size)
            )
    found.sort(key=lambda f: f.name)
    return found


_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>Video Streaming Server</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        h1 {{ color: #333; }}
        .file-list {{ list-style: none; padding: 0; }}
        .file-list li {{ margin: 10px 0; }}
        .file-list a {{ text-decoration: none; color: #007bff; font-size: 16px; }}
        .file-list a:hover {{ text-decoration: underline; }}
        .video-file {{ font-weight: bold; }}
        .file-size {{ color: #666; font-size: 14px; }}
    </style>
</head>
<body>
    <h1>Available Videos</h1>
    <ul class="file-list">
{items}
    </ul>
    <p style="color: #666; font-size: 14px; margin-top: 30px;">
        Copy the video URL and paste it into VLC: Media &gt; Open Network Stream
    </p>
</body>
</html>
"""

_ITEM = (
    '        <li>\n'
    '            <a href="/{href}" class="video-file">{name}</a>\n'
    '            <span class="file-size"> ({size:.2f} MB)</span>\n'
    '        </li>'
)


def render_listing(files: list[ListedFile]) -> str:
    items = "\n".join(
        _ITEM.format(href=quote(f.name), name=escape(f.name), size=f.size_mb) for f in files
    )
    return _PAGE.format(items=items)
