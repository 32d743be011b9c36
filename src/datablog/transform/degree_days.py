"""Compute and reshape heating and cooling degree days.

A degree day measures how far a day's mean temperature falls below (heating) or rises
above (cooling) a base temperature, and is a simple proxy for space heating and cooling
energy demand:

* ``temp_mean = (tmax + tmin) / 2``
* ``hdd = max(0, base - temp_mean)``
* ``cdd = max(0, temp_mean - base)``

The conventional US base temperature is 65 F (18.3 C).

Degree days can be computed here from station temperatures (e.g. CoAgMet daily
observations), or taken ready-made from the NOAA Climate Prediction Center, whose wide
daily tables are reshaped by :func:`tidy_cpc_degree_days`.
"""

import pandas as pd

import datablog.logging_helpers
from datablog.helpers import pivot_longer

logger = datablog.logging_helpers.get_logger(__name__)

DEFAULT_BASE: dict[str, float] = {"F": 65.0, "C": 18.3}

FREQUENCIES: dict[str, str] = {"monthly": "M", "annual": "Y"}
"""Aggregation frequencies and the pandas period each one corresponds to."""


def compute_degree_days(
    df: pd.DataFrame,
    tmax_col: str,
    tmin_col: str,
    base: float | None = None,
    units: str = "F",
) -> pd.DataFrame:
    """Add daily mean temperature, heating and cooling degree days to a table.

    Args:
        df: one row per day, with daily maximum and minimum temperatures.
        tmax_col: name of the daily maximum temperature column.
        tmin_col: name of the daily minimum temperature column.
        base: base temperature. Defaults to 65 F or 18.3 C depending on ``units``.
        units: ``"F"`` or ``"C"``, the units of the temperature columns.

    Returns:
        A copy of ``df`` with ``temp_mean``, ``hdd`` and ``cdd`` columns. Days missing
        either temperature get NaN degree days.
    """
    if units not in DEFAULT_BASE:
        raise ValueError(f"Unknown temperature units {units!r}; expected F or C.")
    if base is None:
        base = DEFAULT_BASE[units]
    out = df.copy()
    out["temp_mean"] = (out[tmax_col] + out[tmin_col]) / 2
    out["hdd"] = (base - out["temp_mean"]).clip(lower=0)
    out["cdd"] = (out["temp_mean"] - base).clip(lower=0)
    return out


def aggregate_degree_days(
    df: pd.DataFrame,
    date_col: str = "date",
    freq: str = "monthly",
    by: list[str] | None = None,
) -> pd.DataFrame:
    """Sum daily degree days into monthly or annual totals.

    Periods in which every day is missing get NaN totals rather than zero. The number
    of days with a mean temperature is reported as ``n_days`` so partial periods can be
    spotted.
    """
    if freq not in FREQUENCIES:
        raise ValueError(f"Unknown frequency {freq!r}; expected one of {FREQUENCIES}.")
    by = by or []
    periods = df[date_col].dt.to_period(FREQUENCIES[freq]).dt.to_timestamp()
    grouped = df.assign(**{date_col: periods}).groupby(by + [date_col])
    out = grouped[["hdd", "cdd"]].sum(min_count=1)
    out["n_days"] = grouped["temp_mean"].count()
    return out.reset_index()


def degree_day_anomaly(
    df: pd.DataFrame,
    value_col: str,
    target_year: int,
    date_col: str = "date",
) -> pd.DataFrame:
    """Compare one year's monthly degree days to the mean of all other years.

    Args:
        df: daily degree days covering several years.
        value_col: ``"hdd"`` or ``"cdd"``.
        target_year: the year to compare.
        date_col: name of the date column.

    Returns:
        One row per month of ``target_year`` with columns ``month``, ``value_col``,
        ``normal``, ``anomaly`` and ``percent_of_normal``.
    """
    monthly = (
        df.assign(year=df[date_col].dt.year, month=df[date_col].dt.month)
        .groupby(["year", "month"])[value_col]
        .sum(min_count=1)
        .reset_index()
    )
    target = monthly.loc[monthly["year"] == target_year, ["month", value_col]]
    if target.empty:
        raise ValueError(f"No {value_col} data found for {target_year}.")
    normal = (
        monthly.loc[monthly["year"] != target_year]
        .groupby("month")[value_col]
        .mean()
        .rename("normal")
    )
    out = target.merge(normal, on="month", how="left")
    out["anomaly"] = out[value_col] - out["normal"]
    out["percent_of_normal"] = 100 * out[value_col] / out["normal"].where(
        out["normal"] != 0
    )
    return out.reset_index(drop=True)


def tidy_cpc_degree_days(raw: pd.DataFrame, kind: str) -> pd.DataFrame:
    """Melt a wide NOAA CPC degree day table into one row per region and day.

    Args:
        raw: as returned by :func:`datablog.extract.cpc.extract_degree_days`, with a
            ``Region`` column and one ``YYYYMMDD`` column per day.
        kind: ``"heating"`` or ``"cooling"``; recorded in the ``kind`` column.

    Returns:
        Columns ``region``, ``date``, ``kind`` and ``degree_days``.
    """
    out = pivot_longer(
        raw.rename(columns={"Region": "region"}),
        id_cols="region",
        names_to="date",
        values_to="degree_days",
    )
    out["region"] = out["region"].str.strip()
    out["date"] = pd.to_datetime(out["date"].astype(str).str.strip(), format="%Y%m%d")
    out["degree_days"] = pd.to_numeric(out["degree_days"], errors="coerce")
    out["kind"] = kind
    return out.loc[:, ["region", "date", "kind", "degree_days"]].sort_values(
        ["region", "date"], ignore_index=True
    )
