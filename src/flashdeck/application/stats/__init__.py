# Application Stats Package
from .metrics_calculator import StudyStats, StudyStatsCalculator

__all__ = ["StudyStatsCalculator", "StudyStats"]
