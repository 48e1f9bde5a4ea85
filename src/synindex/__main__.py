"""Console-script entry point for :mod:`synindex`."""

from __future__ import annotations

from synindex.cli import create_app


def main() -> None:
    """Execute the CLI application.

    Example:
        >>> from synindex.__main__ import main
        >>> main()  # doctest: +SKIP
    """

    app = create_app()
    app(prog_name="synindex")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
