from .aggregation import compute_question_analytics, compute_completion_stats
from .trends import bucket_by_day
from .reports import get_overview_analytics, get_survey_analytics

__all__ = [
    "compute_question_analytics",
    "compute_completion_stats",
    "bucket_by_day",
    "get_overview_analytics",
    "get_survey_analytics",
]
