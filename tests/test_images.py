from pathlib import Path
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
from PIL import Image

from conftest import png_bytes
from nasaquery.errors import MalformedResponseError
from nasaquery.media.images import (
    HeadlessPresenter,
    PillowPresenter,
    ensure_directory,
    present_images,
    resolve_destination,
)


def _records() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"name": "one", "url": "https://example.test/one.png"},
            {"name": "two", "url": "https://example.test/two.png"},
        ]
    )


def test_ensure_directory_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    ensure_directory(target)
    ensure_directory(target)

    assert target.is_dir()


def test_resolve_destination_defaults_to_configured_root(tmp_path: Path) -> None:
    assert resolve_destination("MarsPhotos") == tmp_path / "Desktop" / "MarsPhotos"
    assert resolve_destination("X", root=tmp_path) == tmp_path / "X"


def test_headless_presenter_saves_jpeg_from_rgba(tmp_path: Path) -> None:
    path = tmp_path / "out.jpg"

    HeadlessPresenter().save(png_bytes(), path, "jpg")

    with Image.open(path) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"


def test_pillow_presenter_renders_with_viewer() -> None:
    with patch("nasaquery.media.images.Image.Image.show") as show:
        PillowPresenter().render(png_bytes())

    show.assert_called_once()


def test_presenter_rejects_non_image_bytes(tmp_path: Path) -> None:
    with pytest.raises(MalformedResponseError):
        HeadlessPresenter().save(b"not an image", tmp_path / "x.png", "png")


def test_present_images_without_folder_only_renders(fake_client: MagicMock, tmp_path: Path) -> None:
    presenter = MagicMock()

    present_images(
        _records(),
        url_column="url",
        caption=lambda row: row["name"],
        filename=lambda row: f"{row['name']}.png",
        fmt="png",
        presenter=presenter,
        client=fake_client,
    )

    assert presenter.render.call_count == 2
    presenter.save.assert_not_called()
    assert not (tmp_path / "Desktop").exists()
    fetched = [call.args[0] for call in fake_client.fetch_bytes.call_args_list]
    assert fetched == ["https://example.test/one.png", "https://example.test/two.png"]


def test_present_images_saves_into_destination(fake_client: MagicMock, tmp_path: Path) -> None:
    present_images(
        _records(),
        url_column="url",
        caption=lambda row: row["name"],
        filename=lambda row: f"EPIC_{row['name']}.png",
        fmt="png",
        folder_name="EPIC_Images",
        presenter=HeadlessPresenter(),
        client=fake_client,
    )

    saved = sorted(p.name for p in (tmp_path / "Desktop" / "EPIC_Images").iterdir())
    assert saved == ["EPIC_one.png", "EPIC_two.png"]


def test_present_images_pauses_between_images(fake_client: MagicMock) -> None:
    with patch("nasaquery.media.images.time.sleep") as sleep:
        present_images(
            _records(),
            url_column="url",
            caption=lambda row: row["name"],
            filename=lambda row: "x.png",
            fmt="png",
            presenter=MagicMock(),
            client=fake_client,
            pause=1.5,
        )

    assert sleep.call_count == 2
    sleep.assert_called_with(1.5)


def test_headless_without_folder_skips_downloads_and_pauses(fake_client: MagicMock) -> None:
    with patch("nasaquery.media.images.time.sleep") as sleep:
        present_images(
            _records(),
            url_column="url",
            caption=lambda row: row["name"],
            filename=lambda row: "x.png",
            fmt="png",
            presenter=HeadlessPresenter(),
            client=fake_client,
            pause=2.0,
        )

    fake_client.fetch_bytes.assert_not_called()
    sleep.assert_not_called()


def test_headless_with_folder_saves_without_pausing(fake_client: MagicMock, tmp_path: Path) -> None:
    with patch("nasaquery.media.images.time.sleep") as sleep:
        present_images(
            _records(),
            url_column="url",
            caption=lambda row: row["name"],
            filename=lambda row: f"{row['name']}.png",
            fmt="png",
            folder_name="Saved",
            presenter=HeadlessPresenter(),
            client=fake_client,
            pause=2.0,
        )

    assert fake_client.fetch_bytes.call_count == 2
    sleep.assert_not_called()
    assert len(list((tmp_path / "Desktop" / "Saved").iterdir())) == 2
