"""Display and optionally save the images behind a table of records."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional, Protocol

import pandas as pd
from PIL import Image, UnidentifiedImageError

from nasaquery.config import get_settings
from nasaquery.errors import MalformedResponseError
from nasaquery.ingest.nasa_api import NASAAPIClient

LOGGER = logging.getLogger(__name__)

_PIL_FORMATS = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG"}


class ImagePresenter(Protocol):
    """Minimal interface for showing and writing image bytes."""

    displays: bool

    def render(self, image_bytes: bytes) -> None:
        ...

    def save(self, image_bytes: bytes, path: Path, fmt: str) -> None:
        ...


def _decode(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise MalformedResponseError(f"Downloaded file is not a readable image: {exc}") from exc
    return image


@dataclass
class PillowPresenter:
    """Opens each image in the system viewer and re-encodes it on save."""

    displays: bool = True

    def render(self, image_bytes: bytes) -> None:
        _decode(image_bytes).show()

    def save(self, image_bytes: bytes, path: Path, fmt: str) -> None:
        pil_format = _PIL_FORMATS[fmt.lower()]
        image = _decode(image_bytes)
        if pil_format == "JPEG" and image.mode != "RGB":
            image = image.convert("RGB")
        image.save(path, pil_format)


@dataclass
class HeadlessPresenter(PillowPresenter):
    """Saves like :class:`PillowPresenter` but never opens a viewer."""

    displays: bool = False

    def render(self, image_bytes: bytes) -> None:
        return None


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_destination(folder_name: str, root: Optional[Path] = None) -> Path:
    """Folder under the image root (``~/Desktop`` by default) for this call's files."""
    base = root if root is not None else get_settings().image_root
    return Path(base).expanduser() / folder_name


def present_images(
    records: pd.DataFrame,
    url_column: str,
    caption: Callable[[pd.Series], str],
    filename: Callable[[pd.Series], str],
    fmt: str,
    folder_name: Optional[str] = None,
    presenter: Optional[ImagePresenter] = None,
    client: Optional[NASAAPIClient] = None,
    pause: Optional[float] = None,
) -> None:
    """Download, show and optionally save the image of every row.

    The destination folder is created once, before the first write, and
    only when ``folder_name`` is given. With a presenter that does not
    display and no folder, only the captions are logged: nothing is
    downloaded and there is no pause.
    """
    presenter = presenter or PillowPresenter()
    pause = get_settings().display_pause if pause is None else pause

    destination: Optional[Path] = None
    if folder_name:
        destination = ensure_directory(resolve_destination(folder_name))

    if not presenter.displays and destination is None:
        for _, row in records.iterrows():
            LOGGER.info("%s", caption(row))
        return

    client = client or NASAAPIClient()
    for _, row in records.iterrows():
        LOGGER.info("%s", caption(row))
        image_bytes = client.fetch_bytes(row[url_column])

        if presenter.displays:
            presenter.render(image_bytes)

        if destination is not None:
            file_path = destination / filename(row)
            presenter.save(image_bytes, file_path, fmt)
            LOGGER.info("Saved to: %s", file_path)

        if presenter.displays and pause > 0:
            time.sleep(pause)
