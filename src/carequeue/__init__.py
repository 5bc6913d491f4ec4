"""
Appointment capacity, waitlist and load forecasting for a clinic voice assistant.
"""

from .cli import app


def main() -> None:
    # Delegate to Typer app so `uv run carequeue ...` works.
    app()
