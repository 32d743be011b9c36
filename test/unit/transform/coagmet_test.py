"""Unit tests for the CoAgMet transform module."""

import numpy as np
import pandas as pd
import pytest
import responses

import datablog.extract.coagmet as extract_coagmet
import datablog.transform.coagmet as coagmet
from datablog.workspace.fetcher import WebFetcher


@pytest.fixture()
def raw_daily() -> pd.DataFrame:
    raw = pd.DataFrame(
        {
            "station": ["cht01", "cht01", "cht01"],
            "datetime": ["2023-07-01", "2023-07-02", "2023-07-03"],
        }
    )
    for field in extract_coagmet.FIELDS["daily"]:
        raw[field] = [1.0, 2.0, 3.0]
    raw["tMax"] = [31.2, -999, 30.0]
    raw["tMin"] = [13.8, -999, -999.9]
    raw["precip"] = [0.0, 2.3, -999]
    return raw


def test_clean_station_data_daily(raw_daily):
    """Sentinels become NaN, columns are renamed and dates are parsed."""
    df = coagmet.clean_station_data(raw_daily, "daily")
    assert "air_temp_max_c" in df.columns
    assert "tMax" not in df.columns
    assert set(coagmet.RENAME["daily"].values()) <= set(df.columns)
    np.testing.assert_array_equal(df["air_temp_max_c"], [31.2, np.nan, 30.0])
    np.testing.assert_array_equal(df["air_temp_min_c"], [13.8, np.nan, np.nan])
    np.testing.assert_array_equal(df["precip_mm"], [0.0, 2.3, np.nan])
    assert df["date"].tolist() == list(pd.date_range("2023-07-01", periods=3))
    assert df["station"].tolist() == ["cht01"] * 3


def test_clean_station_data_hourly():
    raw = pd.DataFrame(
        {
            "station": ["fcl01", "fcl01"],
            "datetime": ["2023-07-01T13:00:00", "2023-07-01T14:00:00"],
            "t": [28.1, -999],
            "solarRad": [850.0, 790.0],
            "gustTime": ["2023-07-01T12:41:00", "2023-07-01T13:22:00"],
        }
    )
    df = coagmet.clean_station_data(raw, "hourly")
    assert "date" not in df.columns
    assert df["solar_rad_w_m2"].tolist() == [850.0, 790.0]
    assert np.isnan(df.loc[1, "air_temp_c"])
    assert df["gust_time"].tolist() == raw["gustTime"].tolist()
    assert df.loc[1, "datetime"] == pd.Timestamp("2023-07-01 14:00")


def test_clean_station_data_bad_time_step(raw_daily):
    with pytest.raises(ValueError):
        coagmet.clean_station_data(raw_daily, "weekly")


def test_clean_station_metadata():
    raw = pd.DataFrame(
        {
            "id": ["cht01"],
            "name": ["Cheraw"],
            "location_lat": ["38.0"],
            "location_lon": [-103.5],
            "location_elevation": [1294],
            "activeDate": ["1992-03-04"],
        }
    )
    meta = coagmet.clean_station_metadata(raw)
    assert list(meta.columns) == [
        "station_id",
        "station_name",
        "latitude",
        "longitude",
        "elevation_m",
        "active_date",
    ]
    assert meta.loc[0, "latitude"] == 38.0
    assert meta.loc[0, "active_date"] == pd.Timestamp("1992-03-04")


@responses.activate
def test_fetch_station_data():
    """Extract and clean in a single call."""
    fields = extract_coagmet.FIELDS["daily"]
    values = ",".join(["1.5"] * len(fields))
    body = "\n".join(
        [
            "Station,Date," + ",".join(fields),
            ",," + ",".join(["x"] * len(fields)),
            f"cht01,2023-07-01,{values}",
        ]
    )
    responses.add(
        responses.GET, extract_coagmet.build_data_url("cht01", "daily"), body=body
    )
    df = coagmet.fetch_station_data(WebFetcher(), "cht01", "2023-07-01", "2023-07-01")
    assert len(df) == 1
    assert df.loc[0, "air_temp_max_c"] == 1.5
    assert df.loc[0, "date"] == pd.Timestamp("2023-07-01")
