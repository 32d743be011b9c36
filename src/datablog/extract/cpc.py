"""Retrieve population-weighted degree days from the NOAA Climate Prediction Center.

CPC publishes one text file per year, region set and kind of degree day. Each file
starts with a few lines of free-form description, followed by a ``|`` delimited table
whose header line starts with ``Region|`` and has one column per day (``YYYYMMDD``).
"""

import io
from datetime import date

import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import ResourceKey

logger = datablog.logging_helpers.get_logger(__name__)

BASE_URL = "https://ftp.cpc.ncep.noaa.gov/htdocs/degree_days/weighted/daily_data"

REGIONS: tuple[str, ...] = ("StatesCONUS", "CensusDivisions", "ClimateDivisions")

KINDS: dict[str, str] = {"heating": "Heating", "cooling": "Cooling"}


def build_url(year: int, kind: str, region: str = "StatesCONUS") -> str:
    """Construct the URL of one year of daily degree days."""
    if kind not in KINDS:
        raise ValueError(f"Unknown degree day kind {kind!r}; expected {list(KINDS)}.")
    if region not in REGIONS:
        raise ValueError(f"Unknown CPC region set {region!r}; expected {REGIONS}.")
    return f"{BASE_URL}/{year}/{region}.{KINDS[kind]}.txt"


def parse_degree_days(text: str) -> pd.DataFrame:
    """Parse the ``|`` delimited table out of a CPC degree day file."""
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if line.strip().startswith("Region|"):
            table = "\n".join(line.strip() for line in lines[i:] if line.strip())
            return pd.read_csv(io.StringIO(table), sep="|", dtype={"Region": str})
    raise ValueError("No 'Region|' header line found in CPC degree day file.")


def extract_degree_days(
    fetcher: WebFetcher, year: int, kind: str, region: str = "StatesCONUS"
) -> pd.DataFrame:
    """Download and parse one year of CPC daily degree days.

    Files for past years never change, so they are cached when the fetcher has a
    cache. The current year's file gains a day every day and is always downloaded.
    """
    url = build_url(year, kind, region)
    key = None
    if year < date.today().year:
        key = ResourceKey("cpc", f"{year}_{region}_{kind}.txt")
    content = fetcher.get_bytes(url, key=key)
    return parse_degree_days(content.decode("utf-8"))
