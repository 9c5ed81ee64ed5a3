"""Module entrypoint for ``python -m filecollector``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and scan setup happen in ``filecollector.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
