"""Retrieve alternative fuel station listings from the NREL Alternative Fuels Data Center.

The AFDC station locator API returns every matching station in a single JSON document
when called with ``limit=all``. An NREL developer API key is required.
"""

import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher

logger = datablog.logging_helpers.get_logger(__name__)

URL = "https://developer.nrel.gov/api/alt-fuel-stations/v1.json"


def build_params(
    api_key: str,
    state: str | None = None,
    fuel_type: str = "ELEC",
    status: str = "E",
    access: str | None = "public",
) -> dict[str, str]:
    """Construct the query parameters of a station listing request.

    Args:
        api_key: NREL developer API key.
        state: two letter state code. ``None`` returns stations in every state.
        fuel_type: AFDC fuel type code; ``ELEC`` for EV charging.
        status: ``E`` (open), ``P`` (planned), ``T`` (temporarily unavailable) or
            ``all``.
        access: ``public``, ``private`` or ``None`` for both.
    """
    params = {
        "api_key": api_key,
        "fuel_type": fuel_type,
        "status": status,
        "limit": "all",
    }
    if state is not None:
        params["state"] = state
    if access is not None:
        params["access"] = access
    return params


def extract_stations(
    fetcher: WebFetcher,
    api_key: str,
    state: str | None = None,
    fuel_type: str = "ELEC",
    status: str = "E",
    access: str | None = "public",
) -> pd.DataFrame:
    """Download the list of stations matching the given filters."""
    params = build_params(
        api_key, state=state, fuel_type=fuel_type, status=status, access=access
    )
    body = fetcher.get_json(URL, params=params)
    stations = pd.DataFrame.from_records(body.get("fuel_stations", []))
    total = body.get("total_results")
    if total is not None and int(total) != len(stations):
        logger.warning(
            f"AFDC reported {total} matching stations but returned {len(stations)}."
        )
    logger.info(f"Retrieved {len(stations)} {fuel_type} stations ({state or 'all'}).")
    return stations
