"""Pydantic models for Strava API data structures."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TokenAthlete(BaseModel):
    """Athlete summary embedded in the OAuth token response."""
    model_config = ConfigDict(frozen=True)

    id: int
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    profile: Optional[str] = None


class AuthToken(BaseModel):
    """Strava OAuth token exchange response."""
    model_config = ConfigDict(frozen=True)

    token_type: str = "Bearer"
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    expires_in: Optional[int] = None
    athlete: TokenAthlete


class Athlete(BaseModel):
    """Strava athlete model."""
    model_config = ConfigDict(frozen=True)

    id: int
    username: Optional[str] = None
    resource_state: Optional[int] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    sex: Optional[str] = None
    premium: Optional[bool] = None
    summit: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profile_medium: Optional[str] = None
    profile: Optional[str] = None


class Activity(BaseModel):
    """Strava activity summary, as listed by /athlete/activities."""
    model_config = ConfigDict(frozen=True)

    id: int
    type: str
    sport_type: Optional[str] = None
    name: Optional[str] = None
    start_date: datetime
    start_date_local: Optional[datetime] = None
    timezone: Optional[str] = None
    distance: Optional[float] = None
    total_elevation_gain: Optional[float] = None
    moving_time: Optional[int] = None
    elapsed_time: Optional[int] = None


class AthleteStats(BaseModel):
    """Cycling totals over one time window."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_distance: float = 0
    total_rides: int = 0
    total_elevation_gain: float = 0
    total_moving_time: int = 0


class Period(str, Enum):
    """Look-back windows offered by the dashboard."""
    WEEK = "7"
    MONTH = "30"
    TWO_MONTHS = "60"

    @classmethod
    def from_query(cls, value: Optional[str]) -> "Period":
        """Map a query value to a period; anything unrecognised means 30 days."""
        try:
            return cls(value)
        except ValueError:
            return cls.MONTH

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return _PERIOD_LABELS[self]


_PERIOD_LABELS = {
    Period.WEEK: "Last week",
    Period.MONTH: "Last 30 days",
    Period.TWO_MONTHS: "Last 60 days",
}


class ProfileResponse(BaseModel):
    """Athlete profile with cycling stats for the selected period."""
    athlete: Athlete
    stats: AthleteStats
    period: str = Field(..., description="Label of the selected period")
