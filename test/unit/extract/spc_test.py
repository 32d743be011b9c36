"""Unit tests for the SPC convective outlook extract module."""

import io
import json
import zipfile
from datetime import date

import geopandas as gpd
import pytest
import responses
from shapely.geometry import box, mapping

import datablog.extract.spc as spc
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import LocalFileCache, ResourceKey


def _outlook_geojson() -> bytes:
    features = [
        {
            "type": "Feature",
            "properties": {"DN": 2, "LABEL": "TSTM", "LABEL2": "General Thunder"},
            "geometry": mapping(box(-110, 30, -90, 45)),
        },
        {
            "type": "Feature",
            "properties": {"DN": 4, "LABEL": "SLGT", "LABEL2": "Slight Risk"},
            "geometry": mapping(box(-105, 35, -95, 40)),
        },
    ]
    return json.dumps({"type": "FeatureCollection", "features": features}).encode()


def _outlook_archive(tmp_path, prefix: str = "day1otlk_20240501_1300") -> bytes:
    """Zip up a shapefile archive with a categorical and a tornado layer."""
    shp_dir = tmp_path / "shp"
    shp_dir.mkdir()
    cat = gpd.GeoDataFrame(
        {"DN": [2, 3], "LABEL": ["TSTM", "MRGL"]},
        geometry=[box(-110, 30, -90, 45), box(-105, 35, -95, 40)],
        crs="EPSG:4326",
    )
    cat.to_file(shp_dir / f"{prefix}_cat.shp")
    torn = gpd.GeoDataFrame(
        {"DN": [2], "LABEL": ["0.02"]},
        geometry=[box(-104, 36, -100, 39)],
        crs="EPSG:4326",
    )
    torn.to_file(shp_dir / f"{prefix}_torn.shp")
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w") as archive:
        for path in sorted(shp_dir.iterdir()):
            archive.write(path, arcname=path.name)
    return buffer.getvalue()


def test_build_archive_url():
    assert spc.build_archive_url(date(2024, 5, 1)) == (
        "https://www.spc.noaa.gov/products/outlook/archive/2024/"
        "day1otlk_20240501_1300-shp.zip"
    )
    assert spc.build_archive_url("2023-06-15", day=2, issuance="1730") == (
        "https://www.spc.noaa.gov/products/outlook/archive/2023/"
        "day2otlk_20230615_1730-shp.zip"
    )


@pytest.mark.parametrize("day", [0, 4])
def test_outlook_day_out_of_range(day):
    with pytest.raises(ValueError, match="days 1-3"):
        spc.build_archive_url("2024-05-01", day=day)
    with pytest.raises(ValueError, match="days 1-3"):
        spc.extract_current_outlook(WebFetcher(), day=day)


@responses.activate
def test_extract_current_outlook():
    responses.add(
        responses.GET, spc.CURRENT_URL.format(day=2), body=_outlook_geojson()
    )
    outlook = spc.extract_current_outlook(WebFetcher(), day=2)
    assert isinstance(outlook, gpd.GeoDataFrame)
    assert outlook["LABEL"].tolist() == ["TSTM", "SLGT"]


@responses.activate
def test_extract_archived_outlook_reads_categorical_layer(tmp_path):
    """Only the *_cat.shp layer is read, and the archive is cached."""
    url = spc.build_archive_url("2024-05-01")
    responses.add(responses.GET, url, body=_outlook_archive(tmp_path))
    cache = LocalFileCache(tmp_path / "cache")

    outlook = spc.extract_archived_outlook(
        WebFetcher(cache=cache), date(2024, 5, 1)
    )

    assert outlook["LABEL"].tolist() == ["TSTM", "MRGL"]
    assert cache.contains(ResourceKey("spc", "day1otlk_20240501_1300-shp.zip"))


def test_read_categorical_layer_missing():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w") as archive:
        archive.writestr("day1otlk_20240501_1300_torn.shp", b"")
    with zipfile.ZipFile(buffer) as archive, pytest.raises(KeyError):
        spc.read_categorical_layer(archive)
