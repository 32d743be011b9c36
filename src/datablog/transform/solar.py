"""Clean and summarize Tracking the Sun solar PV installation records."""

import numpy as np
import pandas as pd

import datablog.logging_helpers
from datablog.helpers import simplify_columns

logger = datablog.logging_helpers.get_logger(__name__)

MISSING_CODE = -1

RENAME: dict[str, str] = {
    "pv_system_size_dc": "system_size_dc",
    "system_id_1": "system_id",
}

NUMERIC_COLS: list[str] = [
    "system_size_dc",
    "total_installed_price",
    "rebate_or_grant",
]


def clean_installations(raw: pd.DataFrame) -> pd.DataFrame:
    """Standardize column names and types and compute the installed price per watt.

    ``system_size_dc`` is in kW and ``total_installed_price`` in nominal dollars, so
    ``price_per_watt`` is ``total_installed_price / (system_size_dc * 1000)``. It is
    NaN whenever either input is missing or the system size is not positive.
    """
    df = simplify_columns(raw)
    df = df.rename(columns={k: v for k, v in RENAME.items() if k in df.columns})
    for col in NUMERIC_COLS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
            df[col] = df[col].mask(df[col] == MISSING_CODE, np.nan)
    df["installation_date"] = pd.to_datetime(df["installation_date"], errors="coerce")
    df["installation_year"] = df["installation_date"].dt.year.astype("Int64")
    watts = (df["system_size_dc"] * 1000).where(df["system_size_dc"] > 0)
    if "total_installed_price" in df.columns:
        df["price_per_watt"] = df["total_installed_price"] / watts
    else:
        df["price_per_watt"] = np.nan
    return df


def installations_by_year(
    df: pd.DataFrame, by: list[str] | None = None
) -> pd.DataFrame:
    """Summarize installations per year, with running totals.

    Args:
        df: cleaned installations, as returned by :func:`clean_installations`.
        by: optional extra grouping columns, e.g. ``["state"]`` or
            ``["customer_segment"]``.

    Returns:
        Columns ``by``, ``installation_year``, ``n_installations``, ``capacity_mw``,
        ``median_system_size_kw``, ``median_price_per_watt``,
        ``cumulative_installations`` and ``cumulative_capacity_mw``.
    """
    by = by or []
    out = (
        df.dropna(subset=["installation_year"])
        .groupby(by + ["installation_year"])
        .agg(
            n_installations=("installation_year", "size"),
            capacity_mw=("system_size_dc", "sum"),
            median_system_size_kw=("system_size_dc", "median"),
            median_price_per_watt=("price_per_watt", "median"),
        )
        .reset_index()
        .sort_values(by + ["installation_year"], ignore_index=True)
    )
    out["capacity_mw"] = out["capacity_mw"] / 1000
    running = out.groupby(by) if by else out
    out["cumulative_installations"] = running["n_installations"].cumsum()
    out["cumulative_capacity_mw"] = running["capacity_mw"].cumsum()
    return out
