"""Command-line entrypoint for ``python -m docmerge``."""

from __future__ import annotations

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
