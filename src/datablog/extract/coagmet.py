"""Retrieve weather station data from the Colorado Agricultural Meteorological network.

CoAgMet, run by Colorado State University, publishes daily, hourly and 5-minute
observations for a few hundred agricultural weather stations, along with station
metadata. Northern Water operates a second network served through the same API under a
``nw/`` path prefix.

Observations are requested as CSV with a header row followed by a units row. We ask for
an explicit list of fields so that the column order of the response is known ahead of
time; the raw column names are the CoAgMet field names and are renamed in
:mod:`datablog.transform.coagmet`.
"""

import io
from datetime import date

import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher

logger = datablog.logging_helpers.get_logger(__name__)

BASE_URL = "https://coagmet.colostate.edu/data"

TIME_STEPS: tuple[str, ...] = ("daily", "hourly", "5min")

NETWORKS: dict[str, str] = {
    "coagmet": "",
    "nw": "nw/",
}
"""Map network names to their path prefix in the CoAgMet API."""

SUBDAILY_FIELDS: list[str] = [
    "t",
    "rh",
    "dewpt",
    "vp",
    "solarRad",
    "rso",
    "precip",
    "windSpeed",
    "windDir",
    "gustSpeed",
    "gustTime",
    "st5cm",
    "st15cm",
]

FIELDS: dict[str, list[str]] = {
    "daily": [
        "tAvg",
        "tMax",
        "tMin",
        "vp",
        "rhMax",
        "rhMin",
        "solarRad",
        "precip",
        "windRun",
        "gustSpeed",
        "gustDir",
        "st5Max",
        "st5Min",
        "st15Max",
        "st15Min",
        "etrASCE",
        "etoASCE",
    ],
    "hourly": SUBDAILY_FIELDS,
    "5min": SUBDAILY_FIELDS,
}
"""CoAgMet fields requested for each time step, in response column order."""

ID_COLS: list[str] = ["station", "datetime"]


def _check_time_step(time_step: str) -> None:
    if time_step not in TIME_STEPS:
        raise ValueError(
            f"Unknown CoAgMet time step {time_step!r}. Expected one of {TIME_STEPS}."
        )


def _network_prefix(network: str) -> str:
    try:
        return NETWORKS[network]
    except KeyError as err:
        raise ValueError(
            f"Unknown CoAgMet network {network!r}. Expected one of {list(NETWORKS)}."
        ) from err


def build_data_url(station_id: str, time_step: str, network: str = "coagmet") -> str:
    """Construct the URL of a station's observations for one time step."""
    _check_time_step(time_step)
    prefix = _network_prefix(network)
    return f"{BASE_URL}/{prefix}{time_step}/{station_id}.csv"


def build_data_params(
    start_date: date | str, end_date: date | str, time_step: str
) -> dict[str, str]:
    """Construct the query string for a request of station observations.

    Observations are requested in metric units, with ISO formatted timestamps in
    Colorado local time.
    """
    _check_time_step(time_step)
    start_date = pd.Timestamp(start_date).date()
    end_date = pd.Timestamp(end_date).date()
    if end_date < start_date:
        raise ValueError(f"End date {end_date} is before start date {start_date}.")
    return {
        "header": "yes",
        "from": start_date.isoformat(),
        "to": end_date.isoformat(),
        "tz": "co",
        "units": "m",
        "dateFmt": "iso",
        "fields": ",".join(FIELDS[time_step]),
    }


def build_metadata_url(network: str = "coagmet") -> str:
    """Construct the URL of the station metadata listing for a network."""
    return f"{BASE_URL}/{_network_prefix(network)}metadata.json"


def _read_station_csv(text: str, time_step: str) -> pd.DataFrame:
    """Parse a CoAgMet CSV body, skipping its header and units rows."""
    columns = ID_COLS + FIELDS[time_step]
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) <= 2:
        return pd.DataFrame(columns=columns)
    return pd.read_csv(
        io.StringIO("\n".join(lines[2:])),
        header=None,
        names=columns,
        dtype={"station": str, "datetime": str, "gustTime": str},
    )


def extract_station_data(
    fetcher: WebFetcher,
    station_id: str,
    start_date: date | str,
    end_date: date | str,
    time_step: str = "daily",
    network: str = "coagmet",
) -> pd.DataFrame:
    """Download observations for one station.

    Args:
        fetcher: used to issue the HTTP request.
        station_id: CoAgMet station identifier, e.g. ``"cht01"``.
        start_date: first day of observations (inclusive).
        end_date: last day of observations (inclusive).
        time_step: one of ``"daily"``, ``"hourly"`` or ``"5min"``.
        network: ``"coagmet"`` or ``"nw"`` (Northern Water).

    Returns:
        Raw observations with columns ``station``, ``datetime`` and the CoAgMet fields
        requested for ``time_step``.
    """
    url = build_data_url(station_id, time_step, network=network)
    params = build_data_params(start_date, end_date, time_step)
    raw = _read_station_csv(fetcher.get_text(url, params=params), time_step)
    logger.info(
        f"Read {len(raw)} {time_step} records for CoAgMet station {station_id}."
    )
    return raw


def extract_station_metadata(
    fetcher: WebFetcher, network: str = "coagmet"
) -> pd.DataFrame:
    """Download the list of stations in a network, flattening nested fields."""
    stations = fetcher.get_json(build_metadata_url(network), params={"header": "yes"})
    return pd.json_normalize(stations, sep="_")
