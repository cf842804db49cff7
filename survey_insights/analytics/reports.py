"""Overview and per-survey reports, composed from catalog and response queries."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import config, models, schemas
from ..crud import crud_response, crud_survey
from .aggregation import compute_completion_stats, compute_question_analytics
from .trends import bucket_by_day

logger = logging.getLogger(__name__)


def average_per_survey(total_responses: int, total_surveys: int) -> int:
    """total_responses / total_surveys rounded half up, 0 without surveys."""
    if total_surveys <= 0:
        return 0
    return (2 * total_responses + total_surveys) // (2 * total_surveys)


async def get_overview_analytics(
    db: AsyncSession, now: Optional[datetime] = None
) -> schemas.OverviewReport:
    now = now or datetime.now(timezone.utc)

    total_surveys = await db.scalar(select(func.count(models.Survey.id))) or 0
    active_surveys = (
        await db.scalar(
            select(func.count(models.Survey.id)).where(
                models.Survey.is_active.is_(True)
            )
        )
        or 0
    )
    total_responses = await crud_response.count_responses(db)

    category_rows = await db.execute(
        select(models.Survey.category, func.count(models.Survey.id)).group_by(
            models.Survey.category
        )
    )
    surveys_by_category = [
        schemas.CategoryCount(category=category, count=count)
        for category, count in sorted(
            category_rows.all(), key=lambda row: (-row[1], row[0])
        )
    ]

    since = now - timedelta(days=config.OVERVIEW_TREND_DAYS)
    timestamps = await crud_response.find_submission_times(db, submitted_since=since)
    response_trends = bucket_by_day(timestamps, since=since)

    top_rows = await db.execute(
        select(
            models.Survey.id,
            models.Survey.title,
            models.Survey.response_count,
            models.Survey.category,
        )
        .order_by(models.Survey.response_count.desc(), models.Survey.id)
        .limit(config.TOP_SURVEYS_LIMIT)
    )
    top_surveys = [
        schemas.TopSurvey(
            id=row.id,
            title=row.title,
            response_count=row.response_count or 0,
            category=row.category,
        )
        for row in top_rows
    ]

    logger.debug(
        "Overview computed: %d surveys, %d responses, %d trend bucket(s)",
        total_surveys,
        total_responses,
        len(response_trends),
    )
    return schemas.OverviewReport(
        overview=schemas.OverviewStats(
            total_surveys=total_surveys,
            active_surveys=active_surveys,
            total_responses=total_responses,
            average_responses_per_survey=average_per_survey(
                total_responses, total_surveys
            ),
        ),
        surveys_by_category=surveys_by_category,
        response_trends=response_trends,
        top_surveys=top_surveys,
    )


async def get_survey_analytics(
    db: AsyncSession, survey_id: int
) -> schemas.SurveyAnalyticsReport:
    """Full report for one survey. Raises NotFoundError for unknown ids."""
    survey = await crud_survey.get_survey(db, survey_id)
    responses = await crud_response.find_responses(db, survey_id=survey_id)

    report = schemas.SurveyAnalyticsReport(
        survey=schemas.SurveyIdentity(
            id=survey.id,
            title=survey.title,
            category=survey.category,
            created_at=survey.created_at,
        ),
        total_responses=len(responses),
        response_trends=bucket_by_day(r.submitted_at for r in responses),
        completion_stats=compute_completion_stats(responses),
        question_analytics=compute_question_analytics(survey, responses),
    )
    logger.debug(
        "Analytics for survey %s computed over %d response(s)",
        survey_id,
        len(responses),
    )
    return report
