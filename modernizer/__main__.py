"""Module entrypoint for running Modernizer as ``python -m modernizer``."""

from __future__ import annotations

from modernizer.cli import main


if __name__ == "__main__":
    main()
