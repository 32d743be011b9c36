import logging
from pathlib import Path

import pydantic
import pytest

import datablog
from datablog.workspace.setup import DatablogPaths

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_paths_for_tests(tmp_path_factory):
    """Configures DatablogPaths for tests.

    Both DATABLOG_INPUT and DATABLOG_OUTPUT are set to temporary directories, so unit
    tests never read from the download cache or overwrite existing outputs.
    """
    datablog_tmpdir = tmp_path_factory.mktemp("datablog")

    in_tmp = datablog_tmpdir / "input"
    in_tmp.mkdir()
    out_tmp = datablog_tmpdir / "output"
    out_tmp.mkdir()
    DatablogPaths.set_path_overrides(
        input_dir=str(Path(in_tmp).resolve()),
        output_dir=str(Path(out_tmp).resolve()),
    )
    logger.info(f"Using temporary DATABLOG_INPUT: {in_tmp}")
    logger.info(f"Using temporary DATABLOG_OUTPUT: {out_tmp}")

    try:
        return DatablogPaths()
    except pydantic.ValidationError as err:
        pytest.exit(f"Could not configure temporary datablog paths. Error: {err}.")


@pytest.fixture(scope="session", autouse=True)
def configure_logging_for_tests():
    """Let pytest's caplog fixture see datablog log records."""
    datablog.logging_helpers.configure_root_logger(propagate=True)


@pytest.fixture(autouse=True)
def no_api_keys_from_env(monkeypatch):
    """Make sure a developer's own API keys never leak into unit tests."""
    monkeypatch.delenv("EIA_API_KEY", raising=False)
    monkeypatch.delenv("NREL_API_KEY", raising=False)
