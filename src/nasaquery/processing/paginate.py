"""Page through the CMR collection search and merge the pages into one table."""
from __future__ import annotations

import logging
import math
from typing import List, Optional

import pandas as pd

from nasaquery.errors import ValidationError
from nasaquery.ingest.nasa_api import NASAAPIClient
from nasaquery.processing.normalize import normalize_collections
from nasaquery.validation import DateLike, validate_date_range, validate_result_count

# Largest page the CMR search accepts.
PAGE_SIZE = 2000

LOGGER = logging.getLogger(__name__)


def build_temporal_filter(start_date: Optional[DateLike], end_date: Optional[DateLike]) -> Optional[str]:
    """Return the ``start,end`` temporal parameter, or None when no range is given.

    Supplying only one of the two dates is rejected.
    """
    if start_date is None and end_date is None:
        return None
    if start_date is None or end_date is None:
        raise ValidationError("start_date and end_date must be supplied together")
    start, end = validate_date_range(start_date, end_date)
    return f"{start.isoformat()},{end.isoformat()}"


def reconcile_columns(pages: List[pd.DataFrame]) -> pd.DataFrame:
    """Align pages onto the union of their columns and stack them in arrival order.

    Columns keep first-seen order; cells a page never had are left missing.
    """
    if not pages:
        return pd.DataFrame()

    all_columns: List[str] = []
    seen = set()
    for page in pages:
        for column in page.columns:
            if column not in seen:
                seen.add(column)
                all_columns.append(column)

    aligned = [page.reindex(columns=all_columns) for page in pages]
    return pd.concat(aligned, ignore_index=True)


def search_collections(
    keyword: str,
    n_results: int,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
    client: Optional[NASAAPIClient] = None,
) -> pd.DataFrame:
    """Collect up to ``n_results`` CMR collection entries matching ``keyword``.

    Pages of ``PAGE_SIZE`` entries are requested one after another until
    enough have been gathered or a page comes back empty. Returns an empty
    frame when nothing matches.
    """
    n_results = validate_result_count(n_results)
    temporal = build_temporal_filter(start_date, end_date)
    pages_needed = math.ceil(n_results / PAGE_SIZE)
    if pages_needed == 0:
        return pd.DataFrame()

    client = client or NASAAPIClient()
    pages: List[pd.DataFrame] = []
    for page_num in range(1, pages_needed + 1):
        payload = client.cmr_collections(keyword, page_size=PAGE_SIZE, page_num=page_num, temporal=temporal)
        page = normalize_collections(payload)
        if len(page) == 0:
            LOGGER.info("CMR search %r: page %d is empty, stopping", keyword, page_num)
            break
        LOGGER.info("CMR search %r: page %d/%d returned %d entries", keyword, page_num, pages_needed, len(page))
        pages.append(page)

    merged = reconcile_columns(pages)
    return merged.head(n_results).reset_index(drop=True)
