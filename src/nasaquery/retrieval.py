"""Public entry points: retrieve a NASA dataset as a table, optionally showing its images.

Each endpoint has a pure ``fetch_*`` stage that only talks HTTP and returns
a :class:`pandas.DataFrame`, and the image endpoints add a ``get_*`` wrapper
that passes the table through :func:`nasaquery.media.images.present_images`.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

import pandas as pd

from nasaquery.ingest.nasa_api import NASAAPIClient
from nasaquery.media.images import ImagePresenter, present_images
from nasaquery.processing.normalize import (
    normalize_apod,
    normalize_epic,
    normalize_neo_feed,
    normalize_rover_photos,
)
from nasaquery.processing.paginate import search_collections
from nasaquery.validation import (
    DateLike,
    parse_iso_date,
    validate_date_range,
    validate_rover,
)

# NeoWs rejects feed windows longer than a week.
NEO_MAX_RANGE_DAYS = 7

APOD_CAPTION_CHARS = 300

LOGGER = logging.getLogger(__name__)


def _client(api_key: Optional[str], client: Optional[NASAAPIClient]) -> NASAAPIClient:
    return client or NASAAPIClient(api_key=api_key)


def fetch_apod_records(
    start_date: DateLike,
    end_date: DateLike,
    api_key: Optional[str] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    start, end = validate_date_range(start_date, end_date)
    payload = _client(api_key, client).apod(start, end)
    records = normalize_apod(payload)
    LOGGER.info("APOD %s..%s: %d images", start, end, len(records))
    return records


def fetch_mars_rover_records(
    rover: str,
    earth_date: DateLike,
    api_key: Optional[str] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    validate_rover(rover)
    day = parse_iso_date(earth_date, "earth_date")
    payload = _client(api_key, client).mars_rover_photos(rover, day)
    records = normalize_rover_photos(payload)
    LOGGER.info("Mars rover %s on %s: %d photos", rover, day, len(records))
    return records


def fetch_epic_records(
    date: Optional[DateLike] = None,
    api_key: Optional[str] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """EPIC metadata for ``date``; today's images may not be published yet."""
    day = parse_iso_date(date, "date") if date is not None else _today()
    payload = _client(api_key, client).epic_natural(day)
    records = normalize_epic(payload)
    LOGGER.info("EPIC %s: %d images", day, len(records))
    return records


def _today() -> date:
    return date.today()


def get_apod_metadata(
    start_date: DateLike,
    end_date: DateLike,
    api_key: Optional[str] = None,
    folder_name: Optional[str] = None,
    presenter: Optional[ImagePresenter] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Retrieve Astronomy Picture of the Day images and metadata.

    Non-image media (videos) are dropped. Every image is displayed along
    with its title and the start of its explanation, and saved as
    ``APOD_<date>.jpg`` under ``folder_name`` when one is given.

    Raises:
        EmptyResultError: no image-type entries in the range.
    """
    client = _client(api_key, client)
    records = fetch_apod_records(start_date, end_date, client=client)
    present_images(
        records,
        url_column="url",
        caption=lambda row: (
            f"Date: {row['date']}\nTitle: {row['title']}\n"
            f"Explanation: {row['explanation'][:APOD_CAPTION_CHARS]}..."
        ),
        filename=lambda row: f"APOD_{row['date']}.jpg",
        fmt="jpg",
        folder_name=folder_name,
        presenter=presenter,
        client=client,
    )
    return records


def get_mars_rover_photos_and_metadata(
    rover: str,
    earth_date: DateLike,
    api_key: Optional[str] = None,
    folder_name: Optional[str] = None,
    presenter: Optional[ImagePresenter] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Retrieve the photos a Mars rover took on one Earth date.

    ``rover`` must be one of curiosity, opportunity, spirit or perseverance.
    Saved files are named ``<rover>_<earth_date>_photo<id>.jpg``.
    """
    client = _client(api_key, client)
    records = fetch_mars_rover_records(rover, earth_date, client=client)
    present_images(
        records,
        url_column="image_source_url",
        caption=lambda row: (
            f"Earth Date: {row['earth_date']}\nRover: {row['rover_name']}\nCamera: {row['camera_full_name']}"
        ),
        filename=lambda row: f"{row['rover_name']}_{row['earth_date']}_photo{row['id']}.jpg",
        fmt="jpg",
        folder_name=folder_name,
        presenter=presenter,
        client=client,
    )
    return records


def get_epic_earth_images(
    date: Optional[DateLike] = None,
    api_key: Optional[str] = None,
    folder_name: Optional[str] = None,
    presenter: Optional[ImagePresenter] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Retrieve EPIC natural-colour Earth images; saved as ``EPIC_<image>.png``."""
    client = _client(api_key, client)
    records = fetch_epic_records(date, client=client)
    present_images(
        records,
        url_column="image_url",
        caption=lambda row: f"Image Date-Time: {row['date']}\nCaption: {row['caption']}",
        filename=lambda row: f"EPIC_{row['image']}.png",
        fmt="png",
        folder_name=folder_name,
        presenter=presenter,
        client=client,
    )
    return records


def get_neo_feed(
    start_date: DateLike,
    end_date: Optional[DateLike] = None,
    api_key: Optional[str] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Near-Earth objects approaching within a window of at most seven days.

    ``end_date`` defaults to seven days after ``start_date``.
    """
    start = parse_iso_date(start_date, "start_date")
    end = start + timedelta(days=NEO_MAX_RANGE_DAYS) if end_date is None else end_date
    start, end = validate_date_range(start, end, max_days=NEO_MAX_RANGE_DAYS)
    payload = _client(api_key, client).neo_feed(start, end)
    records = normalize_neo_feed(payload)
    LOGGER.info("NeoWs %s..%s: %d objects", start, end, len(records))
    return records


def get_earthdata(
    keyword: str,
    n_results: int,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Search Earthdata (CMR) collections matching ``keyword``.

    See :func:`nasaquery.processing.paginate.search_collections`.
    """
    return search_collections(keyword, n_results, start_date=start_date, end_date=end_date, client=client)
