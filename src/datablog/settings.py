"""Module for validating datablog fetch settings and API credentials."""

from datetime import date
from typing import Any, ClassVar, Literal, Self

import fsspec
import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)

US_STATE_CODES: frozenset[str] = frozenset(
    """AK AL AR AZ CA CO CT DC DE FL GA HI IA ID IL IN KS KY LA MA MD ME MI MN MO MS MT
    NC ND NE NH NJ NM NV NY OH OK OR PA PR RI SC SD TN TX UT VA VT WA WI WV WY""".split()
)
"""Two letter codes of the 50 states, DC and Puerto Rico."""


def _check_state(state: str, allow_us: bool = False) -> str:
    state = state.strip().upper()
    if state in US_STATE_CODES or (allow_us and state == "US"):
        return state
    raise ValueError(f"{state!r} is not a two letter US state code.")


class ApiKeys(BaseSettings):
    """Credentials for the APIs that require a key.

    Read from the ``EIA_API_KEY`` and ``NREL_API_KEY`` environment variables or a
    ``.env`` file.
    """

    eia_api_key: str | None = None
    nrel_api_key: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def require(self: Self, name: str) -> str:
        """Return the named key, or explain how to set it if it is missing."""
        key = getattr(self, name)
        if not key:
            raise ValueError(
                f"No {name} configured. Set the {name.upper()} environment variable "
                "or add it to a .env file."
            )
        return key


class FrozenBaseModel(BaseModel):
    """BaseModel with global configuration."""

    model_config: ConfigDict = ConfigDict(frozen=True, extra="forbid")


class DateRangeSettings(FrozenBaseModel):
    """A request covering an inclusive range of dates."""

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def end_after_start(self: Self):
        """Make sure the date range is not empty."""
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}."
            )
        return self


class CoagmetSettings(DateRangeSettings):
    """Observations from one CoAgMet weather station."""

    station_id: str
    time_step: Literal["daily", "hourly", "5min"] = "daily"
    network: Literal["coagmet", "nw"] = "coagmet"
    degree_days: bool = False
    """If true, also compute daily and monthly degree days (daily data only)."""

    @model_validator(mode="after")
    def degree_days_need_daily(self: Self):
        """Degree days are computed from daily min/max temperatures."""
        if self.degree_days and self.time_step != "daily":
            raise ValueError("degree_days requires time_step: daily.")
        return self

    @field_validator("station_id")
    @classmethod
    def lowercase_station(cls, station_id: str) -> str:
        """CoAgMet station identifiers are lower case, e.g. ``cht01``."""
        return station_id.strip().lower()


def _eia_period(value: date, frequency: str) -> str:
    """Format a date as the EIA period that contains it."""
    if frequency == "monthly":
        return f"{value:%Y-%m}"
    if frequency == "quarterly":
        return f"{value.year}-Q{(value.month - 1) // 3 + 1}"
    return str(value.year)


class EiaGenerationSettings(FrozenBaseModel):
    """Net generation by fuel type from the EIA API."""

    states: list[str]
    sector_id: str = "99"
    frequency: Literal["annual", "quarterly", "monthly"] = "annual"
    start: str | int | None = None
    end: str | int | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def period_from_date(cls, value: Any, info: ValidationInfo) -> Any:
        """YAML reads ``2015-01-01`` as a date. Use the period containing it."""
        if isinstance(value, date):
            return _eia_period(value, info.data.get("frequency", "annual"))
        return value

    @field_validator("states")
    @classmethod
    def valid_states(cls, states: list[str]) -> list[str]:
        """Accept state codes and ``US``."""
        return [_check_state(state, allow_us=True) for state in states]


class EiaEmissionsSettings(FrozenBaseModel):
    """Annual electric power sector CO2 emissions from the EIA API."""

    states: list[str]
    start: int | None = None
    end: int | None = None
    intensity: bool = True
    """If true, also compute CO2 intensity using annual all-sector net generation."""

    @field_validator("start", "end", mode="before")
    @classmethod
    def year_from_date(cls, value: Any) -> Any:
        """Emissions are annual, so a date stands for its year."""
        if isinstance(value, date):
            return value.year
        return value

    @field_validator("states")
    @classmethod
    def valid_states(cls, states: list[str]) -> list[str]:
        """Accept state codes and ``US``."""
        return [_check_state(state, allow_us=True) for state in states]


class AfdcSettings(FrozenBaseModel):
    """EV charging stations from the NREL Alternative Fuels Data Center."""

    state: str | None = None
    status: Literal["E", "P", "T", "all"] = "E"
    access: Literal["public", "private"] | None = "public"
    by: list[str] = ["ev_network"]
    """Columns to summarize station counts by."""

    @field_validator("state")
    @classmethod
    def valid_state(cls, state: str | None) -> str | None:
        """None means every state."""
        return None if state is None else _check_state(state)


class SolarSettings(FrozenBaseModel):
    """Solar PV installations from LBNL Tracking the Sun."""

    source: str
    """Local path or URL of a Tracking the Sun CSV, zipped CSV or Parquet file."""
    states: list[str] | None = None
    by: list[str] = []
    start_year: int | None = None
    end_year: int | None = None
    """Inclusive bounds on the years reported in the yearly summary."""

    @field_validator("states")
    @classmethod
    def valid_states(cls, states: list[str] | None) -> list[str] | None:
        """Validate state codes."""
        return None if states is None else [_check_state(state) for state in states]


class SpcOutlookSettings(FrozenBaseModel):
    """SPC categorical convective outlooks.

    Without dates, the current outlook is retrieved. With dates, the archived outlooks
    for every day in the range are retrieved, and, if a location is given, the number
    of days at each risk level is counted.
    """

    day: int = Field(1, ge=1, le=3)
    start_date: date | None = None
    end_date: date | None = None
    issuance: str = Field("1300", pattern=r"^\d{4}$")
    location: tuple[float, float] | None = None
    """(longitude, latitude) of the point to summarize risk for."""

    @model_validator(mode="after")
    def complete_date_range(self: Self):
        """Dates come in pairs, in order."""
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("Specify both start_date and end_date, or neither.")
        if self.start_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date is before start_date.")
        return self


class DegreeDaySettings(FrozenBaseModel):
    """NOAA CPC population-weighted daily degree days."""

    years: list[int]
    kind: Literal["heating", "cooling"] = "heating"
    region: Literal["StatesCONUS", "CensusDivisions", "ClimateDivisions"] = (
        "StatesCONUS"
    )


class DatasetsSettings(FrozenBaseModel):
    """An immutable pydantic model listing every dataset request."""

    coagmet: list[CoagmetSettings] = []
    eia_generation: list[EiaGenerationSettings] = []
    eia_emissions: list[EiaEmissionsSettings] = []
    afdc: list[AfdcSettings] = []
    solar: list[SolarSettings] = []
    spc: list[SpcOutlookSettings] = []
    degree_days: list[DegreeDaySettings] = []

    requires_api_key: ClassVar[dict[str, str]] = {
        "eia_generation": "eia_api_key",
        "eia_emissions": "eia_api_key",
        "afdc": "nrel_api_key",
    }

    def get_datasets(self: Self) -> dict[str, list[FrozenBaseModel]]:
        """Gets dictionary of the requested datasets' settings."""
        return {name: requests for name, requests in vars(self).items() if requests}


class FetchSettings(FrozenBaseModel):
    """Main settings validation class."""

    datasets: DatasetsSettings = DatasetsSettings()

    name: str | None = None
    description: str | None = None

    @classmethod
    def from_yaml(cls, path: str) -> "FetchSettings":
        """Create a FetchSettings instance from a yaml_file path.

        Args:
            path: path to a yaml file; this could be remote.

        Returns:
            A fetch settings object.
        """
        with fsspec.open(path) as f:
            yaml_file: dict[str, Any] = yaml.safe_load(f) or {}
        return cls.model_validate(yaml_file)

