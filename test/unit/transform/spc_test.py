"""Unit tests for the SPC outlook transform module."""

from datetime import date

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import box

import datablog.transform.spc as spc

DENVER = (-104.99, 39.74)
MIAMI = (-80.19, 25.76)


def _outlook(labels: list[str], boxes: list[tuple], crs="EPSG:4326", col="LABEL"):
    return gpd.GeoDataFrame(
        {"DN": range(len(labels)), col: labels},
        geometry=[box(*b) for b in boxes],
        crs=crs,
    )


@pytest.fixture()
def nested_outlook() -> gpd.GeoDataFrame:
    """Nested TSTM > MRGL > SLGT polygons around Denver, listed out of order."""
    return spc.clean_outlook(
        _outlook(
            ["SLGT", "TSTM", "MRGL"],
            [(-106, 39, -104, 41), (-110, 30, -90, 45), (-107, 38, -103, 42)],
        )
    )


def test_risk_categories_are_ordered():
    assert spc.RISK_DTYPE.ordered
    assert list(spc.RISK_DTYPE.categories) == spc.RISK_CATEGORIES
    assert set(spc.RISK_NAMES) == set(spc.RISK_CATEGORIES)


def test_clean_outlook(nested_outlook):
    assert list(nested_outlook.columns) == ["label", "label_name", "geometry"]
    assert nested_outlook["label"].tolist() == ["TSTM", "MRGL", "SLGT"]
    assert nested_outlook["label_name"].tolist() == [
        "general thunder",
        "marginal",
        "slight",
    ]
    assert nested_outlook["label"].max() == "SLGT"
    assert nested_outlook.crs.to_epsg() == 4326


def test_clean_outlook_lowercase_label_and_reprojection():
    raw = _outlook(["enh"], [(-106, 39, -104, 41)], col="label").to_crs(epsg=3857)
    out = spc.clean_outlook(raw)
    assert out["label"].tolist() == ["ENH"]
    assert out.crs.to_epsg() == 4326
    assert out.geometry.iloc[0].covers(gpd.points_from_xy([-105], [40])[0])


def test_clean_outlook_unknown_label():
    with pytest.raises(ValueError, match="EXTREME"):
        spc.clean_outlook(_outlook(["EXTREME"], [(-106, 39, -104, 41)]))


def test_clean_outlook_without_label_column():
    raw = gpd.GeoDataFrame({"DN": [2]}, geometry=[box(0, 0, 1, 1)])
    with pytest.raises(KeyError):
        spc.clean_outlook(raw)


def test_max_risk_at_point(nested_outlook):
    """The highest of several nested polygons covering the point wins."""
    assert spc.max_risk_at_point(nested_outlook, *DENVER) == "SLGT"
    assert spc.max_risk_at_point(nested_outlook, -108.5, 43.5) == "TSTM"
    assert spc.max_risk_at_point(nested_outlook, *MIAMI) is None


def test_max_risk_by_date_and_day_counts(nested_outlook):
    tstm_only = spc.clean_outlook(_outlook(["TSTM"], [(-110, 30, -90, 45)]))
    florida = spc.clean_outlook(_outlook(["MRGL"], [(-85, 24, -79, 31)]))
    outlooks = {
        date(2024, 5, 3): tstm_only,
        date(2024, 5, 1): nested_outlook,
        date(2024, 5, 2): florida,
        date(2024, 5, 4): nested_outlook,
    }

    by_date = spc.max_risk_by_date(outlooks, *DENVER)
    assert by_date["date"].tolist() == list(pd.date_range("2024-05-01", periods=4))
    assert by_date["label"].tolist() == ["SLGT", "none", "TSTM", "SLGT"]
    assert by_date["label"].cat.ordered
    assert by_date["label"].min() == "none"

    counts = spc.risk_day_counts(outlooks, *DENVER)
    assert counts["label"].tolist() == ["none", *spc.RISK_CATEGORIES]
    assert counts["n_days"].tolist() == [1, 1, 0, 2, 0, 0, 0]
    assert counts["n_days"].sum() == len(outlooks)
