"""Unit tests for the NOAA CPC degree day extract module."""

from datetime import date

import pytest
import responses

import datablog.extract.cpc as cpc
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import LocalFileCache, ResourceKey

CPC_TEXT = """Data from NOAA/NWS/NCEP/Climate Prediction Center
Population-Weighted Heating Degree Days
Last Updated Jan 3, 2024

Region|20230101|20230102|20230103
Alabama|12|15|9
Colorado|35|38|40
"""


def test_build_url():
    assert cpc.build_url(2023, "heating") == (
        f"{cpc.BASE_URL}/2023/StatesCONUS.Heating.txt"
    )
    assert cpc.build_url(2021, "cooling", "CensusDivisions") == (
        f"{cpc.BASE_URL}/2021/CensusDivisions.Cooling.txt"
    )


@pytest.mark.parametrize(
    "kind,region", [("freezing", "StatesCONUS"), ("heating", "Counties")]
)
def test_build_url_bad_inputs(kind, region):
    with pytest.raises(ValueError):
        cpc.build_url(2023, kind, region)


def test_parse_degree_days():
    """Free-form description lines above the table are skipped."""
    df = cpc.parse_degree_days(CPC_TEXT)
    assert list(df.columns) == ["Region", "20230101", "20230102", "20230103"]
    assert df["Region"].tolist() == ["Alabama", "Colorado"]
    assert df.loc[1, "20230103"] == 40


def test_parse_degree_days_without_table():
    with pytest.raises(ValueError, match="Region"):
        cpc.parse_degree_days("<html>Not Found</html>")


@responses.activate
def test_extract_degree_days_is_cached(tmp_path):
    """A second request for the same year is served from the cache."""
    url = cpc.build_url(2023, "heating")
    responses.add(responses.GET, url, body=CPC_TEXT)
    cache = LocalFileCache(tmp_path)
    fetcher = WebFetcher(cache=cache)

    first = cpc.extract_degree_days(fetcher, 2023, "heating")
    second = cpc.extract_degree_days(fetcher, 2023, "heating")

    assert len(responses.calls) == 1
    assert cache.contains(ResourceKey("cpc", "2023_StatesCONUS_heating.txt"))
    assert first.equals(second)


@responses.activate
def test_current_year_is_never_cached(tmp_path):
    """The file for the current year is updated daily, so it is always downloaded."""
    year = date.today().year
    url = cpc.build_url(year, "heating")
    responses.add(responses.GET, url, body=CPC_TEXT)
    responses.add(
        responses.GET,
        url,
        body=CPC_TEXT.replace("|20230103\n", "|20230103|20230104\n")
        .replace("|9\n", "|9|11\n")
        .replace("|40\n", "|40|42\n"),
    )
    cache = LocalFileCache(tmp_path)
    fetcher = WebFetcher(cache=cache)

    first = cpc.extract_degree_days(fetcher, year, "heating")
    second = cpc.extract_degree_days(fetcher, year, "heating")

    assert len(responses.calls) == 2
    assert not cache.contains(ResourceKey("cpc", f"{year}_StatesCONUS_heating.txt"))
    assert "20230104" not in first.columns
    assert second.columns.tolist()[-1] == "20230104"
