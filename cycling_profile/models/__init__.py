"""Data models for Strava API integration."""

from .strava import Activity, Athlete, AthleteStats, AuthToken, Period, ProfileResponse, TokenAthlete

__all__ = ["Activity", "Athlete", "AthleteStats", "AuthToken", "Period", "ProfileResponse", "TokenAthlete"]
