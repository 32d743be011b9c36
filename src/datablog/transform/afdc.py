"""Clean and summarize EV charging station listings from the AFDC."""

import pandas as pd

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)

STATION_COLS: dict[str, str] = {
    "id": "station_id",
    "station_name": "station_name",
    "city": "city",
    "state": "state",
    "zip": "zip_code",
    "latitude": "latitude",
    "longitude": "longitude",
    "ev_network": "ev_network",
    "facility_type": "facility_type",
    "access_code": "access_code",
    "open_date": "open_date",
    "ev_level1_evse_num": "level1_ports",
    "ev_level2_evse_num": "level2_ports",
    "ev_dc_fast_num": "dc_fast_ports",
}
"""Raw AFDC fields we keep, and what we call them."""

PORT_COLS: list[str] = ["level1_ports", "level2_ports", "dc_fast_ports"]


def clean_stations(raw: pd.DataFrame) -> pd.DataFrame:
    """Select and rename station fields, parse dates and count charging ports.

    Port counts are reported as null when a station has none of a given level, so
    they are filled with zero.
    """
    missing = [col for col in STATION_COLS if col not in raw.columns]
    df = raw.reindex(columns=list(STATION_COLS)).rename(columns=STATION_COLS)
    if missing:
        logger.debug(f"AFDC stations missing fields: {missing}")
    df["open_date"] = pd.to_datetime(df["open_date"], errors="coerce")
    df["open_year"] = df["open_date"].dt.year.astype("Int64")
    for col in PORT_COLS:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)
    df["total_ports"] = df[PORT_COLS].sum(axis="columns")
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")
    return df


def stations_opened_by_year(
    stations: pd.DataFrame, by: list[str] | None = None
) -> pd.DataFrame:
    """Count stations and ports opened each year, with running totals.

    Args:
        stations: cleaned stations, as returned by :func:`clean_stations`.
        by: optional extra grouping columns (e.g. ``["state"]``). Cumulative totals
            are computed within each group.

    Returns:
        Columns ``by``, ``open_year``, ``n_stations``, ``n_ports``,
        ``cumulative_stations`` and ``cumulative_ports``.
    """
    by = by or []
    dated = stations.dropna(subset=["open_year"])
    if (n_undated := len(stations) - len(dated)) > 0:
        logger.info(f"Excluding {n_undated} stations with no open date.")
    out = (
        dated.groupby(by + ["open_year"])
        .agg(n_stations=("station_id", "count"), n_ports=("total_ports", "sum"))
        .reset_index()
        .sort_values(by + ["open_year"], ignore_index=True)
    )
    if by:
        grouped = out.groupby(by)
        out["cumulative_stations"] = grouped["n_stations"].cumsum()
        out["cumulative_ports"] = grouped["n_ports"].cumsum()
    else:
        out["cumulative_stations"] = out["n_stations"].cumsum()
        out["cumulative_ports"] = out["n_ports"].cumsum()
    return out


def stations_by(stations: pd.DataFrame, by: str | list[str]) -> pd.DataFrame:
    """Count stations and ports per group, largest groups first.

    Stations with a null group value (e.g. non-networked stations have no
    ``ev_network``) are counted under ``"none"``.
    """
    by = [by] if isinstance(by, str) else list(by)
    df = stations.copy()
    df[by] = df[by].fillna("none")
    out = (
        df.groupby(by)
        .agg(
            n_stations=("station_id", "count"),
            n_ports=("total_ports", "sum"),
            n_dc_fast_ports=("dc_fast_ports", "sum"),
        )
        .reset_index()
    )
    return out.sort_values(
        ["n_stations"] + by, ascending=[False] + [True] * len(by), ignore_index=True
    )
