"""Clean SPC categorical outlooks and summarize the risk they assign to a location.

Categorical outlooks are a set of nested polygons, one per risk level. A location inside
an ``ENH`` polygon is also inside the ``SLGT``, ``MRGL`` and ``TSTM`` polygons, so the
risk at a point is the highest category among the polygons containing it.
"""

from collections.abc import Mapping
from datetime import date

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)

RISK_CATEGORIES: list[str] = ["TSTM", "MRGL", "SLGT", "ENH", "MDT", "HIGH"]
"""Categorical outlook labels, from lowest to highest risk."""

RISK_NAMES: dict[str, str] = {
    "TSTM": "general thunder",
    "MRGL": "marginal",
    "SLGT": "slight",
    "ENH": "enhanced",
    "MDT": "moderate",
    "HIGH": "high",
}

NO_RISK = "none"

RISK_DTYPE = pd.CategoricalDtype(RISK_CATEGORIES, ordered=True)


def clean_outlook(raw: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Keep the risk label and geometry of each outlook polygon.

    Returns:
        A GeoDataFrame in EPSG:4326 with an ordered categorical ``label``, a readable
        ``label_name`` and the polygon ``geometry``, sorted from lowest to highest risk.
    """
    label_cols = [col for col in raw.columns if col.lower() == "label"]
    if not label_cols:
        raise KeyError(f"No LABEL column found in outlook: {list(raw.columns)}")
    labels = raw[label_cols[0]].astype(str).str.strip().str.upper()
    unknown = set(labels) - set(RISK_CATEGORIES)
    if unknown:
        raise ValueError(f"Unknown categorical outlook labels: {sorted(unknown)}")
    out = gpd.GeoDataFrame(
        {
            "label": labels.astype(RISK_DTYPE),
            "label_name": labels.map(RISK_NAMES),
        },
        geometry=raw.geometry.values,
        crs=raw.crs,
    )
    if out.crs is not None:
        out = out.to_crs(epsg=4326)
    return out.sort_values("label", ignore_index=True)


def max_risk_at_point(outlook: gpd.GeoDataFrame, lon: float, lat: float) -> str | None:
    """Return the highest risk category whose polygon covers a point, or None."""
    covering = outlook.loc[outlook.geometry.covers(Point(lon, lat)), "label"]
    if covering.empty:
        return None
    return str(covering.max())


def max_risk_by_date(
    outlooks: Mapping[date, gpd.GeoDataFrame], lon: float, lat: float
) -> pd.DataFrame:
    """Highest risk at a point for each of a collection of cleaned outlooks.

    Returns:
        Columns ``date`` and ``label``. ``label`` is an ordered categorical that also
        includes the ``"none"`` category (below ``TSTM``) for dates with no risk.
    """
    records = [
        {"date": pd.Timestamp(day), "label": max_risk_at_point(outlook, lon, lat)}
        for day, outlook in outlooks.items()
    ]
    out = pd.DataFrame.from_records(records, columns=["date", "label"])
    out["label"] = pd.Categorical(
        out["label"].fillna(NO_RISK),
        categories=[NO_RISK, *RISK_CATEGORIES],
        ordered=True,
    )
    return out.sort_values("date", ignore_index=True)


def risk_day_counts(
    outlooks: Mapping[date, gpd.GeoDataFrame], lon: float, lat: float
) -> pd.DataFrame:
    """Count the days on which each risk category was the highest at a point.

    Every category (and ``"none"``) appears in the output, with zero counts where it
    never occurred.

    Returns:
        Columns ``label`` and ``n_days``, ordered from no risk to high risk.
    """
    by_date = max_risk_by_date(outlooks, lon, lat)
    counts = by_date["label"].value_counts(sort=False).sort_index()
    return counts.rename_axis("label").reset_index(name="n_days")
