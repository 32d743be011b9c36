"""Routines for writing datablog output tables to files.

Tabular outputs are written as CSV or Apache Parquet. Tables with geometries (SPC
outlooks) are written as GeoJSON when CSV is requested, since a CSV can't hold them,
and as GeoParquet otherwise.
"""

from pathlib import Path
from typing import Literal

import geopandas as gpd
import pandas as pd

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)

OutputFormat = Literal["csv", "parquet"]


def write_table(
    df: pd.DataFrame,
    name: str,
    output_dir: Path,
    fmt: OutputFormat = "csv",
) -> Path:
    """Write one table to ``output_dir``, overwriting any previous output.

    Args:
        df: the table to write. GeoDataFrames are written as GeoJSON or GeoParquet.
        name: table name, used as the file stem.
        output_dir: directory to write to. Created if it doesn't exist.
        fmt: ``"csv"`` or ``"parquet"``.

    Returns:
        Path of the file that was written.
    """
    if fmt not in ("csv", "parquet"):
        raise ValueError(f"Unknown output format {fmt!r}; expected csv or parquet.")
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    is_geo = isinstance(df, gpd.GeoDataFrame)
    if fmt == "parquet":
        path = output_dir / f"{name}.parquet"
        df.to_parquet(path, index=False)
    elif is_geo:
        path = output_dir / f"{name}.geojson"
        categorical = df.select_dtypes("category").columns
        df.astype({col: str for col in categorical}).to_file(path, driver="GeoJSON")
    else:
        path = output_dir / f"{name}.csv"
        df.to_csv(path, index=False)
    logger.info(f"Wrote {len(df)} rows of {name} to {path}")
    return path


def write_tables(
    dfs: dict[str, pd.DataFrame],
    output_dir: Path,
    fmt: OutputFormat = "csv",
) -> list[Path]:
    """Write each of a dictionary of tables, keyed by name."""
    return [write_table(df, name, output_dir, fmt=fmt) for name, df in dfs.items()]
