"""Clean and reshape EIA electricity generation and CO2 emissions.

Net generation from the ``electric-power-operational-data`` route is reported for a
hierarchy of fuel codes: ``ALL`` is the total, ``COW`` (all coal) sums ``BIT``,
``SUB``, ``LIG`` etc., ``SUN`` is utility scale solar, and so on. ``TSN`` (all solar)
adds estimated small scale solar (``DPV``) to ``SUN``, but small scale generation is
not part of ``ALL``. To compute the share of generation by fuel without double counting
we map a single, non-overlapping set of utility scale codes onto a handful of fuel
groups. Codes that are not in :data:`FUEL_GROUPS` (aggregates like ``FOS``, ``REN`` or
``TSN``, small scale solar, and the components of ``COW``/``PET``) get no group.
"""

import numpy as np
import pandas as pd

import datablog.logging_helpers
from datablog.helpers import organize_cols, percent_of_total

logger = datablog.logging_helpers.get_logger(__name__)

TOTAL_FUEL = "ALL"

FUEL_GROUPS: dict[str, str] = {
    "COW": "coal",
    "NG": "natural_gas",
    "NUC": "nuclear",
    "HYC": "hydro",
    "WND": "wind",
    "SUN": "solar",
    "PET": "petroleum",
    "GEO": "other",
    "WWW": "other",
    "WAS": "other",
    "OOG": "other",
    "OTH": "other",
    "HPS": "other",
}
"""Non-overlapping EIA fuel type codes and the fuel group each one belongs to."""

GENERATION_RENAME: dict[str, str] = {
    "period": "report_date",
    "location": "state",
    "stateDescription": "state_name",
    "sectorid": "sector_id",
    "sectorDescription": "sector",
    "fueltypeid": "fuel_type_code",
    "fuelTypeDescription": "fuel_type",
    "generation": "generation_thousand_mwh",
    "generation-units": "generation_units",
}

CO2_RENAME: dict[str, str] = {
    "period": "report_year",
    "stateId": "state",
    "state-name": "state_name",
    "sectorId": "sector_id",
    "sector-name": "sector",
    "fuelId": "fuel_id",
    "fuel-name": "fuel",
    "value": "co2_million_metric_tons",
    "value-units": "co2_units",
}


def _with_columns(df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """Add any of ``cols`` that are missing, e.g. when a query matched no records."""
    return df.reindex(columns=df.columns.union(cols, sort=False))


def parse_period(period: pd.Series) -> pd.Series:
    """Convert EIA period strings into timestamps.

    EIA reports annual periods as ``YYYY``, monthly periods as ``YYYY-MM`` and
    quarterly periods as ``YYYY-QN``. Each period is converted to its first day.
    """
    if period.empty:
        return pd.to_datetime(period)
    period = period.astype(str).str.strip()
    if period.str.fullmatch(r"\d{4}-Q[1-4]").all():
        quarters = pd.PeriodIndex(period.str.replace("-", "", regex=False), freq="Q")
        return pd.Series(quarters.to_timestamp(), index=period.index)
    if period.str.fullmatch(r"\d{4}").all():
        return pd.to_datetime(period, format="%Y")
    if period.str.fullmatch(r"\d{4}-\d{2}").all():
        return pd.to_datetime(period, format="%Y-%m")
    raise ValueError(f"Unrecognized EIA period format: {period.head().tolist()}")


def clean_generation(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename columns, parse dates and assign fuel groups to net generation records.

    Returns:
        Net generation with columns ``report_date``, ``report_year``, ``state``,
        ``sector_id``, ``fuel_type_code``, ``fuel_group`` and
        ``generation_thousand_mwh`` first, followed by any descriptive columns
        present in alphabetical order.
    """
    df = _with_columns(
        raw.rename(columns=GENERATION_RENAME),
        ["report_date", "state", "sector_id", "fuel_type_code"]
        + ["generation_thousand_mwh"],
    )
    df["generation_thousand_mwh"] = pd.to_numeric(
        df["generation_thousand_mwh"], errors="coerce"
    ).astype(float)
    df["report_date"] = parse_period(df["report_date"])
    df["report_year"] = df["report_date"].dt.year
    df["fuel_group"] = df["fuel_type_code"].map(FUEL_GROUPS)
    return organize_cols(
        df,
        [
            "report_date",
            "report_year",
            "state",
            "sector_id",
            "fuel_type_code",
            "fuel_group",
            "generation_thousand_mwh",
        ],
    )


def generation_share_by_fuel(gen: pd.DataFrame) -> pd.DataFrame:
    """Compute the percentage of net generation supplied by each fuel group.

    Shares are relative to the summed generation of all fuel groups, which partition
    the utility scale ``ALL`` total, so within each period they add up to 100.

    Args:
        gen: cleaned net generation, as returned by :func:`clean_generation`.

    Returns:
        One row per ``state``, ``sector_id``, ``report_date`` and ``fuel_group``, with
        the group's ``generation_thousand_mwh`` and its ``percent`` of the total.
        Periods whose total is zero or missing are dropped.
    """
    keys = ["state", "sector_id", "report_date", "report_year"]
    by_group = (
        gen.dropna(subset=["fuel_group"])
        .groupby(keys + ["fuel_group"], as_index=False)["generation_thousand_mwh"]
        .sum(min_count=1)
    )
    out = percent_of_total(by_group, "generation_thousand_mwh", by=keys)
    n_before = out["report_date"].nunique()
    out = out.dropna(subset=["percent"])
    if (n_dropped := n_before - out["report_date"].nunique()) > 0:
        logger.info(f"Dropped {n_dropped} periods with no total generation.")
    return out.sort_values(keys + ["fuel_group"], ignore_index=True)


def clean_co2_emissions(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename columns and coerce types of the EIA CO2 emissions aggregates."""
    df = _with_columns(
        raw.rename(columns=CO2_RENAME),
        ["report_year", "state", "sector_id", "fuel_id", "co2_million_metric_tons"],
    )
    df["report_year"] = pd.to_numeric(df["report_year"]).astype(int)
    df["co2_million_metric_tons"] = pd.to_numeric(
        df["co2_million_metric_tons"], errors="coerce"
    ).astype(float)
    return df


def emissions_intensity(gen: pd.DataFrame, co2: pd.DataFrame) -> pd.DataFrame:
    """Estimate the CO2 intensity of electricity generation by state and year.

    Divides total CO2 emissions of the electric power sector (all fuels) by total annual
    net generation.

    Args:
        gen: cleaned annual net generation including the ``ALL`` fuel total.
        co2: cleaned CO2 emissions including sector ``EC`` and fuel ``TO``.

    Returns:
        Columns ``state``, ``report_year``, ``co2_million_metric_tons``,
        ``generation_thousand_mwh`` and ``co2_kg_per_mwh``.
    """
    total_gen = (
        gen.loc[gen["fuel_type_code"] == TOTAL_FUEL]
        .groupby(["state", "report_year"], as_index=False)["generation_thousand_mwh"]
        .sum(min_count=1)
    )
    total_co2 = co2.loc[
        (co2["sector_id"] == "EC") & (co2["fuel_id"] == "TO"),
        ["state", "report_year", "co2_million_metric_tons"],
    ]
    out = total_co2.merge(total_gen, on=["state", "report_year"], how="inner")
    # million metric tons -> kg, thousand MWh -> MWh
    out["co2_kg_per_mwh"] = (out["co2_million_metric_tons"] * 1e9) / (
        out["generation_thousand_mwh"].replace(0, np.nan) * 1e3
    )
    return out.sort_values(["state", "report_year"], ignore_index=True)
