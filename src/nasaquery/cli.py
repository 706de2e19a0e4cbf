"""CLI utilities for fetching data from NASA APIs."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import pandas as pd
import typer

from nasaquery.errors import NASAQueryError
from nasaquery.media.images import HeadlessPresenter, ImagePresenter, PillowPresenter
from nasaquery.retrieval import (
    get_apod_metadata,
    get_earthdata,
    get_epic_earth_images,
    get_mars_rover_photos_and_metadata,
    get_neo_feed,
)

app = typer.Typer(help="Interact with NASA APIs using the configured API key")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    configure_logging(verbose)


def _presenter(display: bool) -> ImagePresenter:
    return PillowPresenter() if display else HeadlessPresenter()


def _run(fetch: Callable[[], pd.DataFrame]) -> pd.DataFrame:
    try:
        return fetch()
    except NASAQueryError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _write_output(records: pd.DataFrame, output: Optional[Path]) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        if output.suffix.lower() == ".csv":
            records.to_csv(output, index=False)
        else:
            records.to_json(output, orient="records", indent=2)
        typer.secho(f"{len(records)} records written to {output}", fg=typer.colors.GREEN)
    elif records.empty:
        typer.echo("No records.")
    else:
        typer.echo(records.to_string(index=False))


@app.command()
def apod(
    start_date: str = typer.Argument(..., help="First date YYYY-MM-DD"),
    end_date: str = typer.Argument(..., help="Last date YYYY-MM-DD"),
    folder: Optional[str] = typer.Option(None, help="Save images into this folder under the image root"),
    display: bool = typer.Option(True, help="Open each image in the system viewer"),
    output: Optional[Path] = typer.Option(None, help="Write the table to CSV or JSON"),
) -> None:
    """Fetch Astronomy Picture of the Day images and metadata."""
    records = _run(
        lambda: get_apod_metadata(start_date, end_date, folder_name=folder, presenter=_presenter(display))
    )
    _write_output(records, output)


@app.command("mars-photos")
def mars_photos(
    rover: str = typer.Option(..., help="curiosity, opportunity, spirit or perseverance"),
    earth_date: str = typer.Option(..., help="Earth date YYYY-MM-DD"),
    folder: Optional[str] = typer.Option(None, help="Save images into this folder under the image root"),
    display: bool = typer.Option(True, help="Open each image in the system viewer"),
    output: Optional[Path] = typer.Option(None, help="Write the table to CSV or JSON"),
) -> None:
    """Fetch Mars rover photos taken on one Earth date."""
    records = _run(
        lambda: get_mars_rover_photos_and_metadata(
            rover, earth_date, folder_name=folder, presenter=_presenter(display)
        )
    )
    _write_output(records, output)


@app.command()
def epic(
    date: Optional[str] = typer.Option(None, help="Capture date YYYY-MM-DD, defaults to today"),
    folder: Optional[str] = typer.Option(None, help="Save images into this folder under the image root"),
    display: bool = typer.Option(True, help="Open each image in the system viewer"),
    output: Optional[Path] = typer.Option(None, help="Write the table to CSV or JSON"),
) -> None:
    """Fetch EPIC natural-colour Earth images."""
    records = _run(lambda: get_epic_earth_images(date, folder_name=folder, presenter=_presenter(display)))
    _write_output(records, output)


@app.command()
def neo(
    start_date: str = typer.Argument(..., help="First date YYYY-MM-DD"),
    end_date: Optional[str] = typer.Option(None, help="Last date, at most 7 days after start"),
    output: Optional[Path] = typer.Option(None, help="Write the table to CSV or JSON"),
) -> None:
    """Fetch near-Earth objects with close approaches in a date range."""
    records = _run(lambda: get_neo_feed(start_date, end_date))
    _write_output(records, output)


@app.command()
def earthdata(
    keyword: str = typer.Argument(..., help="Search phrase"),
    n_results: int = typer.Option(10, min=0, help="Number of collections to return"),
    start_date: Optional[str] = typer.Option(None, help="Temporal filter start, requires --end-date"),
    end_date: Optional[str] = typer.Option(None, help="Temporal filter end, requires --start-date"),
    output: Optional[Path] = typer.Option(None, help="Write the table to CSV or JSON"),
) -> None:
    """Search Earthdata collection metadata."""
    records = _run(lambda: get_earthdata(keyword, n_results, start_date=start_date, end_date=end_date))
    _write_output(records, output)


if __name__ == "__main__":  # pragma: no cover
    app()
