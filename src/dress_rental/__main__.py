"""Module entry point for python -m dress_rental."""

from __future__ import annotations

from dress_rental.app import main


if __name__ == "__main__":
    raise SystemExit(main())
