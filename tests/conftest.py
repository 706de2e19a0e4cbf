from __future__ import annotations

import json
from io import BytesIO
from typing import Any
from unittest.mock import MagicMock

import pytest
from PIL import Image

from nasaquery.config import get_settings
from nasaquery.ingest.nasa_api import NASAAPIClient


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Point image output at tmp_path, disable display pauses, drop any real key."""
    monkeypatch.delenv("NASA_API_KEY", raising=False)
    monkeypatch.setenv("NASA_IMAGE_ROOT", str(tmp_path / "Desktop"))
    monkeypatch.setenv("NASA_DISPLAY_PAUSE", "0")
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def mock_response(payload: Any = None, status_code: int = 200, content: bytes | None = None) -> MagicMock:
    """Return a mock requests.Response carrying ``payload`` as a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content if content is not None else json.dumps(payload).encode("utf-8")
    response.text = response.content.decode("utf-8", errors="replace")
    return response


def png_bytes(size: tuple[int, int] = (4, 4)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, (10, 20, 30, 255)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_client() -> MagicMock:
    client = MagicMock(spec=NASAAPIClient)
    client.fetch_bytes.return_value = png_bytes()
    return client


def apod_entry(day: str, media_type: str = "image") -> dict:
    return {
        "date": day,
        "title": f"Picture for {day}",
        "explanation": "A" * 400,
        "url": f"https://apod.nasa.gov/apod/image/{day}.jpg",
        "media_type": media_type,
        "service_version": "v1",
    }


def rover_photo(photo_id: int, rover: str = "Curiosity", earth_date: str = "2015-06-03") -> dict:
    return {
        "id": photo_id,
        "sol": 1004,
        "camera": {"id": 20, "name": "FHAZ", "rover_id": 5, "full_name": "Front Hazard Avoidance Camera"},
        "img_src": f"https://mars.nasa.gov/msl-raw-images/{photo_id}.JPG",
        "earth_date": earth_date,
        "rover": {"id": 5, "name": rover, "status": "active"},
    }


def epic_image(name: str, captured: str) -> dict:
    return {
        "identifier": name.rsplit("_", 1)[-1],
        "caption": "This image was taken by NASA's EPIC camera onboard the NOAA DSCOVR spacecraft",
        "image": name,
        "version": "03",
        "date": captured,
        "centroid_coordinates": {"lat": 4.2, "lon": 160.1},
    }


def asteroid(name: str, approaches: list[tuple[str, str, str]], hazardous: bool = False) -> dict:
    return {
        "id": name,
        "name": name,
        "estimated_diameter": {
            "meters": {"estimated_diameter_min": 12.5, "estimated_diameter_max": 27.9},
            "kilometers": {"estimated_diameter_min": 0.0125, "estimated_diameter_max": 0.0279},
        },
        "is_potentially_hazardous_asteroid": hazardous,
        "close_approach_data": [
            {
                "close_approach_date": approach_date,
                "relative_velocity": {"kilometers_per_hour": velocity, "kilometers_per_second": "1.0"},
                "miss_distance": {"kilometers": distance, "lunar": "1.0"},
                "orbiting_body": "Earth",
            }
            for approach_date, velocity, distance in approaches
        ],
    }


def cmr_page(entries: list[dict]) -> dict:
    return {"feed": {"updated": "2024-04-01T00:00:00Z", "id": "collections", "entry": entries}}
