"""
Records returned by the Vitalz REST API.

Field names follow Python conventions; the remote (PascalCase) names are kept
as aliases so payloads validate verbatim. Sleep durations arrive as numeric
text and stay text here; app.core.metrics parses them.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    # The API is loose about numbers vs. strings for identifiers and durations
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _blank_if_none(value: Any) -> Any:
    return "" if value is None else value


def _none_if_blank(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class VitalzRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    login_email: str = Field("", alias="LoginEmail")
    device_user_id: str = Field("", alias="DeviceUserID")

    @field_validator("login_email", "device_user_id", mode="before")
    @classmethod
    def _key_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _as_text(value)


class User(VitalzRecord):
    login_email: str = Field(..., alias="LoginEmail")
    id: str | None = Field(None, alias="ID")
    user_name: str = Field("", alias="UserName")
    device_company: str = Field("", alias="DeviceCompany")

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("user_name", "device_company", mode="before")
    @classmethod
    def _missing_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @property
    def label(self) -> str:
        if not self.user_name:
            return self.login_email
        return f"{self.user_name} ({self.login_email})"


class SleepRecord(VitalzRecord):
    date: str = Field("", alias="Date")
    sleep_onset: str | None = Field(None, alias="SleepOnset")
    wake_up_time: str | None = Field(None, alias="WakeUpTime")

    # seconds, serialized as text
    awake: str | None = Field(None, alias="Awake")
    deep: str | None = Field(None, alias="Deep")
    light: str | None = Field(None, alias="Light")
    total_time_asleep: str | None = Field(None, alias="TotalTimeAsleep")

    @field_validator("date", mode="before")
    @classmethod
    def _missing_date(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("awake", "deep", "light", "total_time_asleep", mode="before")
    @classmethod
    def _duration_text(cls, value: Any) -> Any:
        return _as_text(value)


class ScoreRecord(VitalzRecord):
    date: str = Field("", alias="Date")
    vitalz_score: int | float = Field(0, alias="VitalzScore")
    score_type: str | None = Field(None, alias="ScoreType")

    @field_validator("date", mode="before")
    @classmethod
    def _missing_date(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("vitalz_score", mode="before")
    @classmethod
    def _missing_score(cls, value: Any) -> Any:
        value = _none_if_blank(value)
        return 0 if value is None else value


class StatisticsSample(VitalzRecord):
    date: str = Field("", alias="Date")
    time: str = Field("", alias="Time")
    hr: float | None = Field(None, alias="HR")
    hrv: float | None = Field(None, alias="HRV")
    oxygen_saturation: float | None = Field(None, alias="OxygenSaturation")

    @field_validator("date", "time", mode="before")
    @classmethod
    def _missing_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("hr", "hrv", "oxygen_saturation", mode="before")
    @classmethod
    def _missing_reading(cls, value: Any) -> Any:
        return _none_if_blank(value)
