"""Entry point for running alarmhorn as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the alarmhorn CLI application."""
    app()


if __name__ == "__main__":
    main()
