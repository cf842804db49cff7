import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .. import models, schemas
from ..errors import InvalidInputError, NotFoundError
from .crud_survey import get_survey, increment_response_count

logger = logging.getLogger(__name__)


def _response_filters(
    survey_id: Optional[int] = None, submitted_since: Optional[datetime] = None
):
    filters = []
    if survey_id is not None:
        filters.append(models.SurveyResponse.survey_id == survey_id)
    if submitted_since is not None:
        filters.append(models.SurveyResponse.submitted_at >= submitted_since)
    return filters


def _check_answers(survey: models.Survey, answers) -> None:
    """Every answer must refer to a question of this survey, with the matching type."""
    questions = {q.question_id: q for q in survey.questions}
    seen = set()
    for answer in answers:
        question = questions.get(answer.question_id)
        if question is None:
            raise InvalidInputError(
                f"Question '{answer.question_id}' does not exist in survey {survey.id}."
            )
        if answer.question_type != question.type:
            raise InvalidInputError(
                f"Question '{answer.question_id}' is of type '{question.type}', "
                f"got an answer of type '{answer.question_type}'."
            )
        if answer.question_id in seen:
            raise InvalidInputError(
                f"Question '{answer.question_id}' was answered more than once."
            )
        seen.add(answer.question_id)


def _all_required_answered(survey: models.Survey, answers) -> bool:
    # an empty string is no answer, same as in the analytics
    answered = {a.question_id for a in answers if a.value not in ("", [])}
    return all(q.question_id in answered for q in survey.questions if q.required)


async def create_response(
    db: AsyncSession,
    response_in: schemas.ResponseCreate,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> models.SurveyResponse:
    survey = await get_survey(db, response_in.survey_id)
    if not survey.is_active:
        raise InvalidInputError("Survey is not active.")
    _check_answers(survey, response_in.answers)

    is_complete = response_in.is_complete
    if is_complete is None:
        is_complete = _all_required_answered(survey, response_in.answers)

    db_response = models.SurveyResponse(
        survey_id=survey.id,
        submitted_at=datetime.now(timezone.utc),
        ip_address=ip_address,
        user_agent=user_agent,
        completion_time=response_in.completion_time,
        is_complete=is_complete,
        answers=[
            models.Answer(
                question_id=a.question_id,
                question_type=a.question_type,
                value=a.value,
            )
            for a in response_in.answers
        ],
    )
    db.add(db_response)
    await db.flush()
    await increment_response_count(db, survey.id)
    logger.info(
        "Response %s stored for survey %s (%d answer(s))",
        db_response.id,
        survey.id,
        len(db_response.answers),
    )
    return db_response


async def get_response(db: AsyncSession, response_id: int) -> models.SurveyResponse:
    result = await db.execute(
        select(models.SurveyResponse)
        .options(selectinload(models.SurveyResponse.answers))
        .where(models.SurveyResponse.id == response_id)
    )
    db_response = result.scalar_one_or_none()
    if db_response is None:
        raise NotFoundError("Response", response_id)
    return db_response


async def list_responses(
    db: AsyncSession,
    survey_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[models.SurveyResponse], int]:
    filters = _response_filters(survey_id)
    total = await count_responses(db, survey_id=survey_id)
    result = await db.execute(
        select(models.SurveyResponse)
        .options(selectinload(models.SurveyResponse.answers))
        .where(*filters)
        .order_by(
            models.SurveyResponse.submitted_at.desc(), models.SurveyResponse.id.desc()
        )
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def find_responses(
    db: AsyncSession,
    survey_id: Optional[int] = None,
    submitted_since: Optional[datetime] = None,
) -> List[models.SurveyResponse]:
    """All matching responses with their answers, oldest first."""
    result = await db.execute(
        select(models.SurveyResponse)
        .options(selectinload(models.SurveyResponse.answers))
        .where(*_response_filters(survey_id, submitted_since))
        .order_by(models.SurveyResponse.submitted_at, models.SurveyResponse.id)
    )
    return list(result.scalars().all())


async def find_submission_times(
    db: AsyncSession,
    survey_id: Optional[int] = None,
    submitted_since: Optional[datetime] = None,
) -> List[datetime]:
    """Only the submitted_at column, for trend counting without loading answers."""
    result = await db.execute(
        select(models.SurveyResponse.submitted_at)
        .where(*_response_filters(survey_id, submitted_since))
        .order_by(models.SurveyResponse.submitted_at)
    )
    return list(result.scalars().all())


async def count_responses(
    db: AsyncSession,
    survey_id: Optional[int] = None,
    submitted_since: Optional[datetime] = None,
) -> int:
    total = await db.scalar(
        select(func.count(models.SurveyResponse.id)).where(
            *_response_filters(survey_id, submitted_since)
        )
    )
    return total or 0
