"""Retrieve NOAA Storm Prediction Center categorical convective outlooks.

The current day 1-3 outlooks are published as GeoJSON. Past outlooks are archived as
zipped shapefiles, one archive per issuance, each holding several layers (categorical,
tornado, wind, hail...). We only read the categorical layer, whose file name ends in
``_cat.shp``.
"""

import io
import tempfile
import zipfile
from datetime import date
from pathlib import Path

import geopandas as gpd
import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import ResourceKey

logger = datablog.logging_helpers.get_logger(__name__)

CURRENT_URL = "https://www.spc.noaa.gov/products/outlook/day{day}otlk_cat.lyr.geojson"
ARCHIVE_URL = (
    "https://www.spc.noaa.gov/products/outlook/archive/{year}/"
    "day{day}otlk_{yyyymmdd}_{issuance}-shp.zip"
)

OUTLOOK_DAYS: tuple[int, ...] = (1, 2, 3)


def _check_day(day: int) -> None:
    if day not in OUTLOOK_DAYS:
        raise ValueError(f"SPC categorical outlooks cover days 1-3, not {day}.")


def build_archive_url(outlook_date: date | str, day: int = 1, issuance: str = "1300"):
    """Construct the URL of an archived outlook shapefile."""
    _check_day(day)
    outlook_date = pd.Timestamp(outlook_date)
    return ARCHIVE_URL.format(
        year=outlook_date.year,
        day=day,
        yyyymmdd=outlook_date.strftime("%Y%m%d"),
        issuance=issuance,
    )


def extract_current_outlook(fetcher: WebFetcher, day: int = 1) -> gpd.GeoDataFrame:
    """Download the latest categorical outlook for day 1, 2 or 3."""
    _check_day(day)
    content = fetcher.get_bytes(CURRENT_URL.format(day=day))
    return gpd.read_file(io.BytesIO(content))


def read_categorical_layer(archive: zipfile.ZipFile) -> gpd.GeoDataFrame:
    """Read the categorical layer out of an outlook shapefile archive."""
    names = archive.namelist()
    cat_layers = [name for name in names if name.lower().endswith("_cat.shp")]
    if not cat_layers:
        raise KeyError(f"No categorical outlook layer found in archive: {names}")
    with tempfile.TemporaryDirectory() as tmp_dir:
        archive.extractall(tmp_dir)
        return gpd.read_file(Path(tmp_dir) / cat_layers[0])


def extract_archived_outlook(
    fetcher: WebFetcher,
    outlook_date: date | str,
    day: int = 1,
    issuance: str = "1300",
) -> gpd.GeoDataFrame:
    """Download and read an archived categorical outlook.

    Args:
        fetcher: used to issue the HTTP request. Archives never change, so they are
            cached when the fetcher has a cache.
        outlook_date: the date the outlook was issued.
        day: which outlook day (1, 2 or 3).
        issuance: issuance time (UTC, ``HHMM``). Day 1 outlooks are issued at 0100,
            1200, 1300, 1630 and 2000.
    """
    url = build_archive_url(outlook_date, day=day, issuance=issuance)
    key = ResourceKey("spc", Path(url).name)
    content = fetcher.get_bytes(url, key=key)
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        return read_categorical_layer(archive)
