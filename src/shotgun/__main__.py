"""CLI entrypoint: build a bus from configuration and show its event namespace."""

from __future__ import annotations

import argparse
from collections.abc import Iterator, Sequence
from pathlib import Path

from .config import load_config
from .events import DirectorySnapshot, EventBus
from .logging_utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shotgun",
        description="Inspect the event namespace of a configured shotgun bus",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: ~/.config/shotgun/config.toml)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def _render(snapshot: DirectorySnapshot, depth: int = 0) -> Iterator[str]:
    for name, child in snapshot.children.items():
        yield f"{'  ' * depth}{name}"
        yield from _render(child, depth + 1)


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, configure logging and print the internal events."""
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    config = load_config(config_path=args.config)
    configure_logging(config["logging"])
    bus = EventBus.from_config(config)

    if args.version:
        print(f"shotgun {bus.version}")
        return

    prefix = bus.config.internal_prefix
    print(f"internal events ({prefix}):")
    for line in _render(bus.get_internal_events()):
        print(f"  {line}")


if __name__ == "__main__":
    main()
