"""Turn raw endpoint payloads into uniform pandas tables."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Type, TypeVar

import pandas as pd
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from nasaquery.errors import EmptyResultError, MalformedResponseError
from nasaquery.ingest.models import (
    ApodPayload,
    CmrPayload,
    EpicPayload,
    NeoFeedPayload,
    RoverPhotosPayload,
    parse_capture_date,
)

EPIC_ARCHIVE_ROOT = "https://epic.gsfc.nasa.gov/archive/natural"

APOD_COLUMNS = ["date", "title", "explanation", "url", "media_type"]
ROVER_COLUMNS = ["id", "sol", "camera_full_name", "image_source_url", "earth_date", "rover_name"]
EPIC_COLUMNS = ["image", "caption", "date", "image_url"]
NEO_COLUMNS = [
    "name",
    "close_approach_date",
    "relative_velocity_kph",
    "miss_distance_km",
    "estimated_diameter_min_m",
    "estimated_diameter_max_m",
    "is_potentially_hazardous",
]

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: Type[ModelT], payload: Any, endpoint: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except SchemaError as exc:
        raise MalformedResponseError(
            f"Unexpected {endpoint} payload shape ({exc.error_count()} validation errors): {exc}"
        ) from exc


def normalize_apod(payload: Any) -> pd.DataFrame:
    """Keep image entries only and project them onto the APOD columns."""
    entries = _parse(ApodPayload, payload, "APOD").root
    rows = [
        {
            "date": entry.date,
            "title": entry.title,
            "explanation": entry.explanation,
            "url": entry.url,
            "media_type": entry.media_type,
        }
        for entry in entries
        if entry.media_type == "image"
    ]
    if not rows:
        raise EmptyResultError("No images found in the selected date range!")
    LOGGER.debug("APOD: %d of %d entries are images", len(rows), len(entries))
    return pd.DataFrame(rows, columns=APOD_COLUMNS)


def normalize_rover_photos(payload: Any) -> pd.DataFrame:
    photos = _parse(RoverPhotosPayload, payload, "Mars rover photos").photos
    if not photos:
        raise EmptyResultError("No photos found for this date and rover!")
    rows = [
        {
            "id": photo.id,
            "sol": photo.sol,
            "camera_full_name": photo.camera.full_name,
            "image_source_url": photo.img_src,
            "earth_date": photo.earth_date,
            "rover_name": photo.rover.name,
        }
        for photo in photos
    ]
    return pd.DataFrame(rows, columns=ROVER_COLUMNS)


def epic_archive_url(image_name: str, capture_date: str, archive_root: str = EPIC_ARCHIVE_ROOT) -> str:
    """Build the archive PNG URL, which is organised into year/month/day folders."""
    day = parse_capture_date(capture_date)
    return f"{archive_root}/{day:%Y}/{day:%m}/{day:%d}/png/{image_name}.png"


def normalize_epic(payload: Any) -> pd.DataFrame:
    images = _parse(EpicPayload, payload, "EPIC").root
    if not images:
        raise EmptyResultError("No EPIC images found for this date.")
    rows = [
        {
            "image": image.image,
            "caption": image.caption,
            "date": image.date,
            "image_url": epic_archive_url(image.image, image.date),
        }
        for image in images
    ]
    return pd.DataFrame(rows, columns=EPIC_COLUMNS)


def normalize_neo_feed(payload: Any) -> pd.DataFrame:
    """Flatten the per-day feed into one row per asteroid.

    Only the first close-approach entry of each asteroid is used, so every
    asteroid contributes exactly one row per query window.
    """
    feed = _parse(NeoFeedPayload, payload, "NeoWs feed").near_earth_objects
    if not feed:
        raise EmptyResultError("No near-Earth objects found for the specified date range.")

    rows: List[Dict[str, Any]] = []
    for asteroids in feed.values():
        for asteroid in asteroids:
            diameter = asteroid.estimated_diameter.meters
            row: Dict[str, Any] = {
                "name": asteroid.name,
                "close_approach_date": None,
                "relative_velocity_kph": None,
                "miss_distance_km": None,
                "estimated_diameter_min_m": diameter.estimated_diameter_min,
                "estimated_diameter_max_m": diameter.estimated_diameter_max,
                "is_potentially_hazardous": asteroid.is_potentially_hazardous_asteroid,
            }
            if asteroid.close_approach_data:
                approach = asteroid.close_approach_data[0]
                row["close_approach_date"] = approach.close_approach_date
                row["relative_velocity_kph"] = approach.relative_velocity.kilometers_per_hour
                row["miss_distance_km"] = approach.miss_distance.kilometers
            else:
                LOGGER.warning("Asteroid %s has no close-approach data", asteroid.name)
            rows.append(row)

    if not rows:
        raise EmptyResultError("No near-Earth objects found for the specified date range.")
    return pd.DataFrame(rows, columns=NEO_COLUMNS)


def is_nested_column(name: str) -> bool:
    """Columns holding '.' or '$' come from flattened nested objects."""
    return "." in name or "$" in name


def normalize_collections(payload: Any) -> pd.DataFrame:
    """Flatten one page of CMR collection entries, dropping nested-path columns.

    A page without entries yields a zero-row frame rather than an error.
    """
    entries = _parse(CmrPayload, payload, "CMR collections").feed.entry
    if not entries:
        return pd.DataFrame()
    frame = pd.json_normalize(entries)
    keep = [column for column in frame.columns if not is_nested_column(str(column))]
    return frame.loc[:, keep]
