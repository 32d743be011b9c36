"""A command line interface (CLI) to fetch and reshape the datablog datasets.

The CLI reads a YAML settings file listing the dataset requests to run, for example:

.. code-block:: yaml

    name: colorado-energy
    datasets:
      coagmet:
        - station_id: cht01
          start_date: 2023-01-01
          end_date: 2023-12-31
          degree_days: true
      eia_generation:
        - states: [CO, US]
          frequency: monthly
          start: 2015-01

Each request is downloaded, cleaned and summarized, and every resulting table is
written to the datablog output directory (``$DATABLOG_OUTPUT``). Static files
(archived SPC outlooks, CPC degree day files, Tracking the Sun downloads) are cached in
the input directory (``$DATABLOG_INPUT``) unless ``--no-cache`` is given.
"""

import pathlib

import click

import datablog
from datablog.settings import ApiKeys, FetchSettings
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import LocalFileCache
from datablog.workspace.setup import DatablogPaths

logger = datablog.logging_helpers.get_logger(__name__)


@click.command(
    name="datablog_fetch",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "settings_file",
    type=click.Path(
        exists=True,
        dir_okay=False,
        resolve_path=True,
        path_type=pathlib.Path,
    ),
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "parquet"], case_sensitive=False),
    default="csv",
    help=(
        "Output file format. Tables with geometries are written as GeoJSON when csv "
        "is selected and as GeoParquet otherwise."
    ),
)
@click.option(
    "--no-cache",
    is_flag=True,
    default=False,
    help=(
        "If enabled, locally cached downloads will not be used or stored. Every file "
        "will be downloaded again."
    ),
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    help="Timeout in seconds for each HTTP request.",
)
@click.option(
    "--logfile",
    help="If specified, write logs to this file.",
    type=click.Path(
        exists=False,
        resolve_path=True,
        path_type=pathlib.Path,
    ),
)
@click.option(
    "--loglevel",
    default="INFO",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
)
def main(
    settings_file: pathlib.Path,
    fmt: str,
    no_cache: bool,
    timeout: float,
    logfile: pathlib.Path | None,
    loglevel: str,
):
    """Fetch the datasets listed in SETTINGS_FILE and write them out as tables.

    Fetch everything in a settings file, writing CSV and GeoJSON outputs:

    datablog_fetch settings.yml

    Write Parquet outputs instead, downloading every file again:

    datablog_fetch settings.yml --format parquet --no-cache
    """
    datablog.logging_helpers.configure_root_logger(
        logfile=logfile, loglevel=loglevel.upper()
    )

    settings = FetchSettings.from_yaml(str(settings_file))
    if settings.name:
        logger.info(f"Running datablog_fetch for {settings.name}")

    paths = DatablogPaths()
    cache = None
    if not no_cache:
        cache = LocalFileCache(paths.input_dir)
    fetcher = WebFetcher(timeout=timeout, cache=cache)

    dfs = datablog.etl.etl(settings, fetcher, api_keys=ApiKeys())
    written = datablog.load.write_tables(dfs, paths.output_dir, fmt=fmt.lower())
    logger.info(f"Wrote {len(written)} tables to {paths.output_dir}")
    return 0
