"""Cycling statistics aggregated from Strava activity summaries."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from cycling_profile.models.strava import Activity, AthleteStats, Period

logger = logging.getLogger(__name__)


def _as_aware(value: datetime) -> datetime:
    """Read naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_cycling_activity(activity: Activity) -> bool:
    # Substring match is deliberately broad: EBikeRide, MountainBikeRide, VirtualRide...
    sport_type = activity.sport_type or ""
    return activity.type == "Ride" or "Bike" in sport_type or "Ride" in sport_type


def filter_cycling_activities(activities: Iterable[Activity]) -> List[Activity]:
    """Keep only the cycling activities."""
    activities = list(activities)
    logger.debug(f"Filtering {len(activities)} activities for cycling activities")

    cycling = [a for a in activities if is_cycling_activity(a)]

    logger.debug(f"Found {len(cycling)} cycling activities")
    return cycling


def filter_activities_by_date_range(
    activities: Iterable[Activity],
    start: datetime,
    end: datetime
) -> List[Activity]:
    """Keep activities whose start date lies in [start, end], both ends included."""
    start, end = _as_aware(start), _as_aware(end)
    logger.debug(f"Filtering activities from {start.isoformat()} to {end.isoformat()}")

    filtered = [a for a in activities if start <= _as_aware(a.start_date) <= end]

    logger.debug(f"Found {len(filtered)} activities in date range")
    return filtered


def aggregate_cycling_stats(activities: Iterable[Activity]) -> AthleteStats:
    """Sum distance, elevation gain and moving time, and count the rides.

    Missing numeric values count as zero; an empty list gives all-zero stats.
    """
    total_distance = 0.0
    total_rides = 0
    total_elevation_gain = 0.0
    total_moving_time = 0

    for activity in activities:
        total_distance += activity.distance or 0
        total_rides += 1
        total_elevation_gain += activity.total_elevation_gain or 0
        total_moving_time += activity.moving_time or 0

    stats = AthleteStats(
        total_distance=total_distance,
        total_rides=total_rides,
        total_elevation_gain=total_elevation_gain,
        total_moving_time=total_moving_time
    )
    logger.info(
        f"Stats aggregated: {stats.total_rides} rides, "
        f"{stats.total_distance / 1000:.1f}km, {stats.total_elevation_gain:.0f}m"
    )
    return stats


def get_stats_for_period(
    activities: Iterable[Activity],
    days: int,
    now: Optional[datetime] = None
) -> AthleteStats:
    """Cycling stats over the last `days` days, ending at `now`."""
    end = _as_aware(now) if now else datetime.now(timezone.utc)
    start = end - timedelta(days=days)
    logger.info(f"Getting last {days} days cycling stats")

    cycling = filter_cycling_activities(activities)
    recent = filter_activities_by_date_range(cycling, start, end)
    return aggregate_cycling_stats(recent)


def get_stats_for(period: Period, activities: Iterable[Activity], now: Optional[datetime] = None) -> AthleteStats:
    return get_stats_for_period(activities, period.days, now=now)


def get_last_week_stats(activities: Iterable[Activity], now: Optional[datetime] = None) -> AthleteStats:
    return get_stats_for_period(activities, 7, now=now)


def get_last_30_days_stats(activities: Iterable[Activity], now: Optional[datetime] = None) -> AthleteStats:
    return get_stats_for_period(activities, 30, now=now)


def get_last_60_days_stats(activities: Iterable[Activity], now: Optional[datetime] = None) -> AthleteStats:
    return get_stats_for_period(activities, 60, now=now)
