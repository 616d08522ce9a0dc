from __future__ import annotations

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from .config import ServerConfig
from .logging_conf import get_logger, setup_logging
from .main import create_app

logger = get_logger("cli")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse `mediaserve [ROOT_DIR] [PORT]` plus optional flags."""
    parser = argparse.ArgumentParser(
        prog="mediaserve", description="Serve media files with HTTP range support"
    )
    parser.add_argument("root_dir", nargs="?", default=None, help="directory to serve (default: .)")
    parser.add_argument("port", nargs="?", type=int, default=None, help="listen port (default: 32767)")
    parser.add_argument("--host", default=None)
    parser.add_argument("--log-level", default=None, dest="log_level")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Merge CLI arguments over the environment; exit on invalid settings."""
    try:
        return ServerConfig.from_env(
            root_dir=args.root_dir,
            port=args.port,
            host=args.host,
            log_level=args.log_level,
        )
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise SystemExit(f"invalid configuration: {errors}") from e


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    config = build_config(args)
    setup_logging(config.log_level)

    logger.info(
        "server.banner",
        extra={
            "event": "banner",
            "port": config.port,
            "root_dir": str(config.root_dir),
            "example_url": f"http://{config.host}:{config.port}/filename.mkv",
        },
    )
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_config=None,  # keep the JSON handlers installed above
    )


if __name__ == "__main__":
    main()
