"""Tools for setting up and managing datablog workspaces."""

import os
from pathlib import Path
from typing import Self

from pydantic import DirectoryPath, NewPath, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)

PotentialDirectoryPath = DirectoryPath | NewPath


class DatablogPaths(BaseSettings):
    """These settings provide access to the datablog input and output directories.

    It is primarily configured via DATABLOG_INPUT and DATABLOG_OUTPUT environment
    variables. Downloaded raw files are cached under the input directory, and the
    tables written by ``datablog_fetch`` land in the output directory.
    """

    datablog_input: PotentialDirectoryPath = Path.home() / "datablog" / "input"
    datablog_output: PotentialDirectoryPath = Path.home() / "datablog" / "output"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def create_directories(self: Self):
        """Create input and output directories if they don't already exist."""
        self.input_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def input_dir(self) -> Path:
        """Path to datablog input directory."""
        return Path(self.datablog_input).expanduser().absolute()

    @property
    def output_dir(self) -> Path:
        """Path to datablog output directory."""
        return Path(self.datablog_output).expanduser().absolute()

    def output_file(self, filename: str) -> Path:
        """Path to file in datablog output directory."""
        return self.output_dir / filename

    @staticmethod
    def set_path_overrides(
        input_dir: str | None = None,
        output_dir: str | None = None,
    ) -> None:
        """Set DATABLOG_INPUT and/or DATABLOG_OUTPUT env variables.

        Args:
            input_dir: if set, overrides DATABLOG_INPUT env variable.
            output_dir: if set, overrides DATABLOG_OUTPUT env variable.
        """
        if input_dir:
            os.environ["DATABLOG_INPUT"] = input_dir
        if output_dir:
            os.environ["DATABLOG_OUTPUT"] = output_dir
