"""Module entrypoint for ``python -m panestack``."""

from .cli import main


if __name__ == "__main__":
    main()
