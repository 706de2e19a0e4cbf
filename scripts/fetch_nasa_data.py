"""CLI utilities for fetching data from NASA APIs."""
from __future__ import annotations

from nasaquery.cli import app

if __name__ == "__main__":  # pragma: no cover
    app()
