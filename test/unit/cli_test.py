"""Tests for the datablog_fetch command line interface."""

import pandas as pd
import pytest
from click.testing import CliRunner

from datablog.cli import main
from datablog.workspace.resource_cache import LocalFileCache
from datablog.workspace.setup import DatablogPaths


@pytest.fixture()
def settings_file(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text(
        "name: test\n"
        "datasets:\n"
        "  afdc:\n"
        "    - state: CO\n"
    )
    return path


@pytest.fixture(autouse=True)
def keep_test_logging(mocker):
    """Leave the logging configured by the test suite alone."""
    return mocker.patch("datablog.logging_helpers.configure_root_logger")


@pytest.fixture()
def mock_etl(mocker):
    return mocker.patch(
        "datablog.etl.etl",
        return_value={"afdc__ev_stations_co": pd.DataFrame({"station_id": [1, 2]})},
    )


def test_fetch_writes_tables(settings_file, mock_etl):
    """Settings are read, the ETL runs with a cached fetcher and tables are written."""
    result = CliRunner().invoke(main, [str(settings_file)])

    assert result.exit_code == 0, result.output
    settings, fetcher = mock_etl.call_args.args
    assert list(settings.datasets.get_datasets()) == ["afdc"]
    assert isinstance(fetcher.cache, LocalFileCache)
    assert fetcher.cache.cache_root_dir == DatablogPaths().input_dir
    written = DatablogPaths().output_dir / "afdc__ev_stations_co.csv"
    assert pd.read_csv(written)["station_id"].tolist() == [1, 2]


def test_fetch_parquet_without_cache(settings_file, mock_etl):
    result = CliRunner().invoke(
        main, [str(settings_file), "--format", "parquet", "--no-cache"]
    )

    assert result.exit_code == 0, result.output
    fetcher = mock_etl.call_args.args[1]
    assert fetcher.cache is None
    assert (DatablogPaths().output_dir / "afdc__ev_stations_co.parquet").exists()


def test_fetch_invalid_settings(tmp_path, mock_etl):
    path = tmp_path / "settings.yml"
    path.write_text("datasets:\n  afdc:\n    - state: XX\n")
    result = CliRunner().invoke(main, [str(path)])
    assert result.exit_code != 0
    mock_etl.assert_not_called()


def test_fetch_missing_settings_file(tmp_path):
    result = CliRunner().invoke(main, [str(tmp_path / "nope.yml")])
    assert result.exit_code != 0
    assert "does not exist" in result.output
