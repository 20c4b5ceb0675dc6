"""Entry point for 'python -m presshooks' command."""

from presshooks.cli import main

if __name__ == "__main__":
    main()
