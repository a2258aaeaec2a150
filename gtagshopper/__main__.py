"""Module entrypoint for ``python -m gtagshopper``.

All argument parsing and session setup happen in ``gtagshopper.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
