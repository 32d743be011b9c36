"""Clean CoAgMet weather station observations and metadata.

CoAgMet reports missing values with a ``-999`` sentinel, uses camelCase field names
and reports everything in metric units when asked for ``units=m``. The cleaned tables
use snake_case column names that carry their units.
"""

from datetime import date

import numpy as np
import pandas as pd

import datablog.logging_helpers
from datablog.extract import coagmet as extract_coagmet
from datablog.helpers import simplify_columns
from datablog.workspace.fetcher import WebFetcher

logger = datablog.logging_helpers.get_logger(__name__)

MISSING_SENTINEL = -999

SUBDAILY_RENAME: dict[str, str] = {
    "t": "air_temp_c",
    "rh": "rel_humidity_pct",
    "dewpt": "dewpoint_c",
    "vp": "vapor_pressure_kpa",
    "solarRad": "solar_rad_w_m2",
    "rso": "clear_sky_solar_rad_w_m2",
    "precip": "precip_mm",
    "windSpeed": "wind_speed_m_s",
    "windDir": "wind_dir_deg",
    "gustSpeed": "gust_speed_m_s",
    "gustTime": "gust_time",
    "st5cm": "soil_temp_5cm_c",
    "st15cm": "soil_temp_15cm_c",
}

RENAME: dict[str, dict[str, str]] = {
    "daily": {
        "tAvg": "air_temp_avg_c",
        "tMax": "air_temp_max_c",
        "tMin": "air_temp_min_c",
        "vp": "vapor_pressure_kpa",
        "rhMax": "rel_humidity_max_pct",
        "rhMin": "rel_humidity_min_pct",
        "solarRad": "solar_rad_mj_m2",
        "precip": "precip_mm",
        "windRun": "wind_run_km",
        "gustSpeed": "gust_speed_m_s",
        "gustDir": "gust_dir_deg",
        "st5Max": "soil_temp_5cm_max_c",
        "st5Min": "soil_temp_5cm_min_c",
        "st15Max": "soil_temp_15cm_max_c",
        "st15Min": "soil_temp_15cm_min_c",
        "etrASCE": "et_ref_alfalfa_mm",
        "etoASCE": "et_ref_grass_mm",
    },
    "hourly": SUBDAILY_RENAME,
    "5min": SUBDAILY_RENAME,
}
"""Map raw CoAgMet field names to cleaned column names for each time step."""

NON_NUMERIC_COLS: set[str] = {"station", "datetime", "gust_time"}

METADATA_RENAME: dict[str, str] = {
    "id": "station_id",
    "name": "station_name",
    "location_lat": "latitude",
    "location_lon": "longitude",
    "location_elevation": "elevation_m",
    "elevation": "elevation_m",
}


def clean_station_data(raw: pd.DataFrame, time_step: str) -> pd.DataFrame:
    """Rename columns, mask missing values and parse timestamps.

    Args:
        raw: observations as returned by
            :func:`datablog.extract.coagmet.extract_station_data`.
        time_step: the time step the observations were requested for.

    Returns:
        Observations with snake_case column names, numeric measurements (missing
        values as NaN) and a parsed ``datetime`` column. Daily observations also get
        a ``date`` column.
    """
    if time_step not in RENAME:
        raise ValueError(f"Unknown CoAgMet time step {time_step!r}.")
    df = raw.rename(columns=RENAME[time_step])
    value_cols = [c for c in df.columns if c not in NON_NUMERIC_COLS]
    for col in value_cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")
        df[col] = df[col].mask(df[col] <= MISSING_SENTINEL, np.nan)
    df["station"] = df["station"].astype("string")
    df["datetime"] = pd.to_datetime(df["datetime"], format="ISO8601")
    if time_step == "daily":
        df["date"] = df["datetime"].dt.normalize()
    return df


def clean_station_metadata(raw: pd.DataFrame) -> pd.DataFrame:
    """Standardize the station metadata listing."""
    df = simplify_columns(raw)
    df = df.rename(
        columns={k: v for k, v in METADATA_RENAME.items() if k in df.columns}
    )
    for col in ["latitude", "longitude", "elevation_m"]:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in ["active_date", "inactive_date"]:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors="coerce")
    return df


def fetch_station_data(
    fetcher: WebFetcher,
    station_id: str,
    start_date: date | str,
    end_date: date | str,
    time_step: str = "daily",
    network: str = "coagmet",
) -> pd.DataFrame:
    """Download and clean observations for one station in a single call."""
    raw = extract_coagmet.extract_station_data(
        fetcher,
        station_id,
        start_date,
        end_date,
        time_step=time_step,
        network=network,
    )
    return clean_station_data(raw, time_step)


def fetch_station_metadata(
    fetcher: WebFetcher, network: str = "coagmet"
) -> pd.DataFrame:
    """Download and clean the station listing of a network."""
    return clean_station_metadata(
        extract_coagmet.extract_station_metadata(fetcher, network=network)
    )
