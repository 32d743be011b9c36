"""General utility functions that are used in a variety of contexts.

Most of these are small dataframe reshaping tools shared by the transform modules:
simplifying column labels, moving between wide and long formats, and computing shares
of a total within groups. If a function is designed to be used as a general purpose
tool, applicable to more than one data source, it should probably live here.
"""

from typing import Any

import pandas as pd

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)


def simplify_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Simplify column labels for use as snake_case fields.

    All column labels will be simplified by:

    * Inserting an underscore between camelCase word boundaries.
    * Replacing all non-alphanumeric characters with spaces.
    * Forcing all letters to be lower case.
    * Compacting internal whitespace to a single " ".
    * Stripping leading and trailing whitespace.
    * Replacing all remaining whitespace with underscores.

    Args:
        df: The DataFrame whose column labels to simplify.

    Returns:
        A dataframe with simplified column names.
    """
    df = df.copy()
    df.columns = (
        df.columns.astype(str)
        .str.replace(r"([a-z0-9])([A-Z])", r"\1_\2", regex=True)
        .str.replace(r"[^0-9a-zA-Z]+", " ", regex=True)
        .str.strip()
        .str.lower()
        .str.replace(r"\s+", " ", regex=True)
        .str.replace(" ", "_")
    )
    return df


def organize_cols(df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """Organize columns into key ID & name fields & alphabetical data columns.

    For readability, it's nice to group a few key columns at the beginning
    of the dataframe (e.g. report_year or date, station_id...) and then
    put all the rest of the data columns in alphabetical order.

    Args:
        df: The DataFrame to be re-organized.
        cols: The columns to put first, in their desired output ordering.

    Returns:
        A dataframe with the same columns as the input DataFrame df, but with cols
        first, in the same order as they were passed in, and the remaining columns
        sorted alphabetically.
    """
    data_cols = sorted(c for c in df.columns.tolist() if c not in cols)
    return df[cols + data_cols]


def pivot_wider(
    df: pd.DataFrame,
    index: str | list[str],
    names_from: str,
    values_from: str,
    fill_value: Any = None,
) -> pd.DataFrame:
    """Reshape a long table into one row per ``index`` with a column per name.

    Args:
        df: long format table with exactly one row per ``index`` and ``names_from``.
        index: column(s) identifying each output row.
        names_from: column whose values become the new column labels.
        values_from: column holding the values to spread.
        fill_value: value used where a name is missing for some row.

    Returns:
        A wide table with flat column labels and a default RangeIndex.
    """
    index = [index] if isinstance(index, str) else list(index)
    wide = df.pivot(index=index, columns=names_from, values=values_from)
    if fill_value is not None:
        wide = wide.fillna(fill_value)
    wide.columns = [str(col) for col in wide.columns]
    return wide.reset_index()


def pivot_longer(
    df: pd.DataFrame,
    id_cols: str | list[str],
    value_cols: list[str] | None = None,
    names_to: str = "variable",
    values_to: str = "value",
) -> pd.DataFrame:
    """Reshape a wide table into one row per observation.

    Args:
        df: wide format table.
        id_cols: column(s) identifying each input row. These are kept as-is.
        value_cols: columns to stack. Defaults to every column not in ``id_cols``.
        names_to: name of the output column holding the former column labels.
        values_to: name of the output column holding the values.
    """
    id_cols = [id_cols] if isinstance(id_cols, str) else list(id_cols)
    return df.melt(
        id_vars=id_cols,
        value_vars=value_cols,
        var_name=names_to,
        value_name=values_to,
    )


def percent_of_total(
    df: pd.DataFrame,
    value_col: str,
    by: str | list[str],
    pct_col: str = "percent",
) -> pd.DataFrame:
    """Add each row's share (0-100) of the ``value_col`` total within its group."""
    out = df.copy()
    totals = out.groupby(by, observed=True)[value_col].transform("sum")
    out[pct_col] = 100 * out[value_col] / totals.where(totals != 0)
    return out


def filter_years(
    df: pd.DataFrame,
    start: int | None = None,
    end: int | None = None,
    year_col: str = "report_year",
) -> pd.DataFrame:
    """Keep rows whose ``year_col`` lies within [start, end]. Either bound is optional."""
    mask = pd.Series(True, index=df.index)
    if start is not None:
        mask &= df[year_col] >= start
    if end is not None:
        mask &= df[year_col] <= end
    return df.loc[mask]

