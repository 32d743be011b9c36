"""Run every dataset request in a settings file through extract and transform.

Each ``_etl_<source>()`` function takes the list of validated requests for one data
source and returns a dictionary of output tables, keyed by a name of the form
``<source>__<detail>``, e.g. ``coagmet__daily_cht01`` or ``eia__generation_share_co``.
:func:`etl` runs all of them and merges their outputs, ready to be written out by
:mod:`datablog.load`.
"""

import re
from pathlib import Path
from urllib.parse import urlparse

import geopandas as gpd
import pandas as pd

import datablog
from datablog.helpers import filter_years, pivot_wider
from datablog.settings import (
    AfdcSettings,
    ApiKeys,
    CoagmetSettings,
    DegreeDaySettings,
    EiaEmissionsSettings,
    EiaGenerationSettings,
    FetchSettings,
    SolarSettings,
    SpcOutlookSettings,
)
from datablog.workspace.fetcher import WebFetcher

logger = datablog.logging_helpers.get_logger(__name__)


def _etl_coagmet(
    coagmet_settings: list[CoagmetSettings], fetcher: WebFetcher
) -> dict[str, pd.DataFrame]:
    """Weather station observations, and optionally their degree days."""
    dfs = {}
    for req in coagmet_settings:
        obs = datablog.transform.coagmet.fetch_station_data(
            fetcher,
            req.station_id,
            req.start_date,
            req.end_date,
            time_step=req.time_step,
            network=req.network,
        )
        dfs[f"coagmet__{req.time_step}_{req.station_id}"] = obs
        if req.degree_days:
            daily = datablog.transform.degree_days.compute_degree_days(
                obs, "air_temp_max_c", "air_temp_min_c", units="C"
            )
            dfs[f"coagmet__degree_days_{req.station_id}"] = daily.loc[
                :, ["station", "date", "temp_mean", "hdd", "cdd"]
            ]
            dfs[f"coagmet__monthly_degree_days_{req.station_id}"] = (
                datablog.transform.degree_days.aggregate_degree_days(
                    daily, freq="monthly", by=["station"]
                )
            )
    return dfs


def _etl_eia_generation(
    gen_settings: list[EiaGenerationSettings], fetcher: WebFetcher, api_key: str
) -> dict[str, pd.DataFrame]:
    """Net generation by fuel, and each fuel group's share of the total."""
    dfs = {}
    for req in gen_settings:
        for state in req.states:
            raw = datablog.extract.eia.extract_generation(
                fetcher,
                api_key,
                state,
                sector_id=req.sector_id,
                frequency=req.frequency,
                start=req.start,
                end=req.end,
            )
            gen = datablog.transform.eia.clean_generation(raw)
            share = datablog.transform.eia.generation_share_by_fuel(gen)
            dfs[f"eia__generation_{state.lower()}"] = gen
            dfs[f"eia__generation_share_{state.lower()}"] = share
            if share.empty:
                continue
            # One column of percentages per fuel group, for stacked charts.
            dfs[f"eia__generation_share_wide_{state.lower()}"] = pivot_wider(
                share,
                index=["state", "sector_id", "report_date", "report_year"],
                names_from="fuel_group",
                values_from="percent",
                fill_value=0.0,
            )
    return dfs


def _etl_eia_emissions(
    co2_settings: list[EiaEmissionsSettings], fetcher: WebFetcher, api_key: str
) -> dict[str, pd.DataFrame]:
    """Annual CO2 emissions and, optionally, CO2 intensity of generation."""
    dfs = {}
    for req in co2_settings:
        for state in req.states:
            co2 = datablog.transform.eia.clean_co2_emissions(
                datablog.extract.eia.extract_co2_emissions(
                    fetcher, api_key, state, start=req.start, end=req.end
                )
            )
            dfs[f"eia__co2_emissions_{state.lower()}"] = co2
            if req.intensity:
                gen = datablog.transform.eia.clean_generation(
                    datablog.extract.eia.extract_generation(
                        fetcher,
                        api_key,
                        state,
                        frequency="annual",
                        start=req.start,
                        end=req.end,
                    )
                )
                dfs[f"eia__co2_intensity_{state.lower()}"] = (
                    datablog.transform.eia.emissions_intensity(gen, co2)
                )
    return dfs


def _etl_afdc(
    afdc_settings: list[AfdcSettings], fetcher: WebFetcher, api_key: str
) -> dict[str, pd.DataFrame]:
    """EV charging stations, and counts by opening year and by category."""
    dfs = {}
    for req in afdc_settings:
        where = (req.state or "us").lower()
        stations = datablog.transform.afdc.clean_stations(
            datablog.extract.afdc.extract_stations(
                fetcher,
                api_key,
                state=req.state,
                status=req.status,
                access=req.access,
            )
        )
        dfs[f"afdc__ev_stations_{where}"] = stations
        dfs[f"afdc__ev_stations_by_year_{where}"] = (
            datablog.transform.afdc.stations_opened_by_year(stations)
        )
        if req.by:
            dfs[f"afdc__ev_stations_by_{'_'.join(req.by)}_{where}"] = (
                datablog.transform.afdc.stations_by(stations, req.by)
            )
    return dfs


def _source_name(source: str) -> str:
    """A short table name fragment for a local path or URL."""
    filename = Path(urlparse(source).path).name
    return re.sub(r"\W+", "_", filename.split(".")[0]).strip("_").lower()


def _etl_solar(
    solar_settings: list[SolarSettings], fetcher: WebFetcher
) -> dict[str, pd.DataFrame]:
    """Solar PV installations and yearly installation summaries."""
    dfs = {}
    for req in solar_settings:
        name = _source_name(req.source)
        installs = datablog.transform.solar.clean_installations(
            datablog.extract.solar.extract_installations(
                req.source, fetcher=fetcher, states=req.states
            )
        )
        dfs[f"solar__installations_{name}"] = installs
        by_year = datablog.transform.solar.installations_by_year(installs, by=req.by)
        dfs[f"solar__installations_by_year_{name}"] = filter_years(
            by_year, req.start_year, req.end_year, year_col="installation_year"
        )
    return dfs


def _etl_spc(
    spc_settings: list[SpcOutlookSettings], fetcher: WebFetcher
) -> dict[str, pd.DataFrame]:
    """Current or archived categorical outlooks, and the risk they gave a location."""
    dfs = {}
    for req in spc_settings:
        if req.start_date is None:
            dfs[f"spc__day{req.day}_outlook_current"] = (
                datablog.transform.spc.clean_outlook(
                    datablog.extract.spc.extract_current_outlook(fetcher, day=req.day)
                )
            )
            continue
        outlooks = {
            day.date(): datablog.transform.spc.clean_outlook(
                datablog.extract.spc.extract_archived_outlook(
                    fetcher, day.date(), day=req.day, issuance=req.issuance
                )
            )
            for day in pd.date_range(req.start_date, req.end_date, freq="D")
        }
        suffix = f"day{req.day}_{req.start_date:%Y%m%d}_{req.end_date:%Y%m%d}"
        dfs[f"spc__outlooks_{suffix}"] = pd.concat(
            [
                outlook.assign(date=pd.Timestamp(day))
                for day, outlook in outlooks.items()
            ],
            ignore_index=True,
        )
        if req.location is not None:
            lon, lat = req.location
            dfs[f"spc__max_risk_by_date_{suffix}"] = (
                datablog.transform.spc.max_risk_by_date(outlooks, lon, lat)
            )
            dfs[f"spc__risk_day_counts_{suffix}"] = (
                datablog.transform.spc.risk_day_counts(outlooks, lon, lat)
            )
    return dfs


def _etl_degree_days(
    dd_settings: list[DegreeDaySettings], fetcher: WebFetcher
) -> dict[str, pd.DataFrame]:
    """NOAA CPC population-weighted daily degree days, all requested years stacked."""
    dfs = {}
    for req in dd_settings:
        tidy = pd.concat(
            [
                datablog.transform.degree_days.tidy_cpc_degree_days(
                    datablog.extract.cpc.extract_degree_days(
                        fetcher, year, req.kind, region=req.region
                    ),
                    req.kind,
                )
                for year in sorted(req.years)
            ],
            ignore_index=True,
        )
        dfs[f"cpc__{req.kind}_degree_days_{req.region.lower()}"] = tidy
    return dfs


def etl(
    settings: FetchSettings,
    fetcher: WebFetcher,
    api_keys: ApiKeys | None = None,
) -> dict[str, pd.DataFrame | gpd.GeoDataFrame]:
    """Run every configured dataset request through its extract and transform steps.

    Missing API keys are detected before any data is requested, so that a long run
    doesn't fail halfway through.

    Args:
        settings: the validated dataset requests.
        fetcher: issues (and optionally caches) all HTTP requests.
        api_keys: credentials for the EIA and NREL APIs. Read from the environment if
            not given.

    Returns:
        Output tables keyed by ``<source>__<detail>`` names.
    """
    api_keys = api_keys or ApiKeys()
    datasets = settings.datasets.get_datasets()
    keys = {
        name: api_keys.require(key_name)
        for name, key_name in settings.datasets.requires_api_key.items()
        if name in datasets
    }

    dfs = {}
    if datasets.get("coagmet", False):
        dfs.update(_etl_coagmet(datasets["coagmet"], fetcher))
    if datasets.get("eia_generation", False):
        dfs.update(
            _etl_eia_generation(
                datasets["eia_generation"], fetcher, keys["eia_generation"]
            )
        )
    if datasets.get("eia_emissions", False):
        dfs.update(
            _etl_eia_emissions(datasets["eia_emissions"], fetcher, keys["eia_emissions"])
        )
    if datasets.get("afdc", False):
        dfs.update(_etl_afdc(datasets["afdc"], fetcher, keys["afdc"]))
    if datasets.get("solar", False):
        dfs.update(_etl_solar(datasets["solar"], fetcher))
    if datasets.get("spc", False):
        dfs.update(_etl_spc(datasets["spc"], fetcher))
    if datasets.get("degree_days", False):
        dfs.update(_etl_degree_days(datasets["degree_days"], fetcher))

    logger.info(f"Produced {len(dfs)} tables: {', '.join(sorted(dfs))}")
    return dfs
