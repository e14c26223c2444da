"""Module entrypoint for `python -m module_registry`."""

from module_registry.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
