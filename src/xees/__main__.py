"""Entry point for running xees as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the xees CLI application."""
    app()


if __name__ == "__main__":
    main()
