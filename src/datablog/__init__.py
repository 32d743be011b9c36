"""Data access and reshaping tools for a personal energy & weather data blog."""

from importlib.metadata import version

from . import (  # noqa: F401
    cli,
    etl,
    extract,
    helpers,
    load,
    logging_helpers,
    settings,
    transform,
    workspace,
)

logging_helpers.configure_root_logger()

__author__ = "datablog contributors"
__license__ = "MIT License"
__version__ = version("datablog")
__docformat__ = "restructuredtext en"
__description__ = "Fetch and reshape public energy and weather datasets."
__long_description__ = """
datablog collects the small pieces of data plumbing behind a personal data-science
blog: fetching CoAgMet weather-station records, EIA electricity generation and CO2
emissions, NREL EV charging station listings, LBNL solar PV installations, NOAA
degree days and Storm Prediction Center convective outlooks, and reshaping them
into tidy tables ready for charts, tables and maps.
"""
