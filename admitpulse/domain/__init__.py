from admitpulse.domain.filters import UNRESTRICTED, FilterSet, Selection
from admitpulse.domain.record import StatsRecord
from admitpulse.domain.snapshot import DashboardSnapshot
from admitpulse.domain.view import DashboardView

__all__ = [
    "UNRESTRICTED",
    "FilterSet",
    "Selection",
    "StatsRecord",
    "DashboardSnapshot",
    "DashboardView",
]
