"""Retrieve electricity generation and CO2 emissions from the EIA Open Data API (v2).

The v2 API is organized as a tree of routes (e.g.
``electricity/electric-power-operational-data``). Requesting ``<route>/data`` returns a
JSON document with the matching records under ``response.data`` and the total number
of matching records under ``response.total``. At most 5000 records are returned per
request, so larger queries are paged through with the ``offset`` parameter.

Query parameters use a bracket syntax that maps poorly onto a dictionary, since keys
repeat: ``data[0]=generation&facets[location][]=CO&facets[location][]=WY``. We build
the query as a list of ``(key, value)`` tuples instead, which :mod:`requests` encodes in
order.
"""

import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher

logger = datablog.logging_helpers.get_logger(__name__)

BASE_URL = "https://api.eia.gov/v2"
PAGE_LENGTH = 5000

FREQUENCIES: tuple[str, ...] = ("annual", "quarterly", "monthly")

GENERATION_ROUTE = "electricity/electric-power-operational-data"
CO2_EMISSIONS_ROUTE = "co2-emissions/co2-emissions-aggregates"


def build_params(
    api_key: str,
    data: list[str],
    facets: dict[str, str | list[str]] | None = None,
    frequency: str = "annual",
    start: str | int | None = None,
    end: str | int | None = None,
    offset: int = 0,
    length: int = PAGE_LENGTH,
) -> list[tuple[str, str]]:
    """Construct the query parameters of an EIA API v2 data request.

    Args:
        api_key: EIA API key.
        data: names of the data columns to return, e.g. ``["generation"]``.
        facets: facet name to one or more facet values used to filter the records.
        frequency: ``"annual"``, ``"quarterly"`` or ``"monthly"``.
        start: first period to return (e.g. ``2010`` or ``"2010-01"``).
        end: last period to return.
        offset: index of the first record to return.
        length: number of records to return (at most 5000).

    Returns:
        A list of ``(key, value)`` query parameters, sorted by period ascending.
    """
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown EIA frequency {frequency!r}; expected {FREQUENCIES}.")
    params = [("api_key", api_key), ("frequency", frequency)]
    params += [(f"data[{i}]", col) for i, col in enumerate(data)]
    for facet, values in (facets or {}).items():
        if isinstance(values, str):
            values = [values]
        params += [(f"facets[{facet}][]", str(value)) for value in values]
    if start is not None:
        params.append(("start", str(start)))
    if end is not None:
        params.append(("end", str(end)))
    params += [
        ("sort[0][column]", "period"),
        ("sort[0][direction]", "asc"),
        ("offset", str(offset)),
        ("length", str(length)),
    ]
    return params


def get_data(
    fetcher: WebFetcher,
    route: str,
    api_key: str,
    data: list[str],
    facets: dict[str, str | list[str]] | None = None,
    frequency: str = "annual",
    start: str | int | None = None,
    end: str | int | None = None,
) -> pd.DataFrame:
    """Retrieve every record matching a query, one page at a time.

    Returns:
        All records as a dataframe with the column names used by the API.
    """
    url = f"{BASE_URL}/{route.strip('/')}/data/"
    records: list[dict] = []
    offset = 0
    while True:
        params = build_params(
            api_key,
            data,
            facets=facets,
            frequency=frequency,
            start=start,
            end=end,
            offset=offset,
        )
        response = fetcher.get_json(url, params=params)["response"]
        for warning in response.get("warnings", []):
            logger.warning(
                f"EIA API warning for {route}: {warning.get('warning')}: "
                f"{warning.get('description')}"
            )
        page = response.get("data", [])
        records += page
        # The API reports the total number of matching records as a string.
        total = int(response.get("total", 0))
        offset += len(page)
        if not page or offset >= total:
            break
        logger.info(f"Retrieved {offset} of {total} records from {route}.")
    if not records:
        logger.warning(f"No records matched the query to {route}.")
    return pd.DataFrame.from_records(records)


def extract_generation(
    fetcher: WebFetcher,
    api_key: str,
    state: str | list[str],
    sector_id: str = "99",
    frequency: str = "annual",
    start: str | int | None = None,
    end: str | int | None = None,
) -> pd.DataFrame:
    """Retrieve net generation by fuel type for one or more states.

    Args:
        fetcher: used to issue the HTTP requests.
        api_key: EIA API key.
        state: two letter state code(s), or ``"US"``.
        sector_id: EIA sector; ``"99"`` is all sectors, ``"98"`` the electric power
            sector.
        frequency: ``"annual"``, ``"quarterly"`` or ``"monthly"``.
        start: first period to return.
        end: last period to return.
    """
    return get_data(
        fetcher,
        GENERATION_ROUTE,
        api_key,
        data=["generation"],
        facets={"location": state, "sectorid": sector_id},
        frequency=frequency,
        start=start,
        end=end,
    )


def extract_co2_emissions(
    fetcher: WebFetcher,
    api_key: str,
    state: str | list[str],
    sector_id: str | None = "EC",
    fuel_id: str | None = None,
    start: str | int | None = None,
    end: str | int | None = None,
) -> pd.DataFrame:
    """Retrieve annual energy-related CO2 emissions for one or more states.

    Args:
        fetcher: used to issue the HTTP requests.
        api_key: EIA API key.
        state: two letter state code(s), or ``"US"``.
        sector_id: EIA emissions sector; ``"EC"`` is the electric power sector,
            ``"TT"`` all sectors. ``None`` returns every sector.
        fuel_id: ``"CO"`` (coal), ``"NG"`` (natural gas), ``"PE"`` (petroleum) or
            ``"TO"`` (all fuels). ``None`` returns every fuel.
        start: first year to return.
        end: last year to return.
    """
    facets: dict[str, str | list[str]] = {"stateId": state}
    if sector_id is not None:
        facets["sectorId"] = sector_id
    if fuel_id is not None:
        facets["fuelId"] = fuel_id
    return get_data(
        fetcher,
        CO2_EMISSIONS_ROUTE,
        api_key,
        data=["value"],
        facets=facets,
        frequency="annual",
        start=start,
        end=end,
    )
