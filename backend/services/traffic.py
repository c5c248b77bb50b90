# backend/services/traffic.py
from dataclasses import dataclass
from datetime import datetime

TRAFFIC_NOTE = 'Estimated from local time of day, not live traffic data'

WEEKEND = (5, 6)


@dataclass
class TrafficInfo:
    level: str
    note: str = TRAFFIC_NOTE


def estimate_traffic(now: datetime) -> TrafficInfo:
    """Coarse congestion level for the given local time.

    Hour windows are inclusive at both ends. Weekday hours outside every
    window, 07:00 included, fall through to Low.
    """
    hour = now.hour

    if now.weekday() in WEEKEND:
        if 11 <= hour <= 20:
            return TrafficInfo(level='Moderate')
        return TrafficInfo(level='Low')

    if 8 <= hour <= 10 or 17 <= hour <= 20:
        return TrafficInfo(level='High')
    elif 11 <= hour <= 16:
        return TrafficInfo(level='Moderate')
    else:
        return TrafficInfo(level='Low')
