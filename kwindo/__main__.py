"""Entry point for ``python -m kwindo``."""

from kwindo.cli import cli


if __name__ == "__main__":
    cli(prog_name="kwindo")
