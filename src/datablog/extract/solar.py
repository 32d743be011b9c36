"""Read solar PV installation records from Lawrence Berkeley National Lab's Tracking the Sun.

Tracking the Sun is distributed as large CSV (optionally zipped) and Parquet files,
with one row per installed system. Missing values are coded as ``-1``. The files are
big, so remote sources are cached when the fetcher has a cache, and rows can be limited
to a set of states and columns as they are read.
"""

import io
from pathlib import Path
from urllib.parse import urlparse

import pandas as pd

import datablog.logging_helpers
from datablog.workspace.fetcher import WebFetcher
from datablog.workspace.resource_cache import ResourceKey

logger = datablog.logging_helpers.get_logger(__name__)

NA_VALUES: list[str] = ["-1", "-1.0", "-1.00"]


def _is_url(source: str | Path) -> bool:
    return urlparse(str(source)).scheme in ("http", "https")


def _read(buffer, name: str, usecols: list[str] | None) -> pd.DataFrame:
    if name.endswith(".parquet"):
        return pd.read_parquet(buffer, columns=usecols)
    compression = "zip" if name.endswith(".zip") else "infer"
    return pd.read_csv(
        buffer,
        compression=compression,
        usecols=usecols,
        na_values=NA_VALUES,
        low_memory=False,
    )


def extract_installations(
    source: str | Path,
    fetcher: WebFetcher | None = None,
    states: list[str] | None = None,
    usecols: list[str] | None = None,
) -> pd.DataFrame:
    """Read Tracking the Sun installation records.

    Args:
        source: local path or http(s) URL of a ``.csv``, ``.csv.zip``/``.zip`` or
            ``.parquet`` file.
        fetcher: required when ``source`` is a URL.
        states: if given, only keep installations in these states.
        usecols: if given, only read these columns. Must include ``state`` when
            ``states`` is given.

    Returns:
        The raw installation records, with ``-1`` read as missing in CSV sources.
    """
    name = str(source).lower()
    if _is_url(source):
        if fetcher is None:
            raise ValueError(f"A fetcher is required to download {source}.")
        filename = Path(urlparse(str(source)).path).name
        content = fetcher.get_bytes(str(source), key=ResourceKey("solar", filename))
        df = _read(io.BytesIO(content), name, usecols)
    else:
        df = _read(Path(source), name, usecols)
    if states is not None:
        df = df.loc[df["state"].isin(states)].reset_index(drop=True)
    logger.info(f"Read {len(df)} solar installation records from {source}.")
    return df
