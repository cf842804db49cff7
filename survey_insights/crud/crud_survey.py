import logging
import math
import time
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .. import models, schemas
from ..errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def generate_question_id(index: int) -> str:
    return f"q_{int(time.time() * 1000)}_{index}"


def survey_to_schema(survey: models.Survey) -> schemas.SurveyRead:
    return schemas.SurveyRead(
        id=survey.id,
        title=survey.title,
        description=survey.description,
        category=survey.category,
        questions=[
            schemas.QuestionRead(
                id=q.question_id,
                type=q.type,
                question=q.text,
                options=q.options,
                required=q.required,
                order=q.order,
            )
            for q in survey.questions
        ],
        tags=survey.tags or [],
        is_active=survey.is_active,
        created_by=survey.created_by,
        response_count=survey.response_count or 0,
        created_at=survey.created_at,
        updated_at=survey.updated_at,
    )


def pagination(page: int, limit: int, total: int) -> schemas.Pagination:
    return schemas.Pagination(
        page=page, limit=limit, total=total, pages=math.ceil(total / limit)
    )


def _build_questions(questions) -> List[models.SurveyQuestion]:
    built = []
    seen_ids = set()
    for index, question in enumerate(questions):
        question_id = getattr(question, "id", None) or generate_question_id(index)
        if question_id in seen_ids:
            raise InvalidInputError(f"Duplicate question id '{question_id}'.")
        seen_ids.add(question_id)
        built.append(
            models.SurveyQuestion(
                question_id=question_id,
                type=question.type,
                text=question.question,
                options=question.options,
                required=question.required,
                order=index,
            )
        )
    return built


async def get_survey(db: AsyncSession, survey_id: int) -> models.Survey:
    result = await db.execute(
        select(models.Survey)
        .options(selectinload(models.Survey.questions))
        .where(models.Survey.id == survey_id)
        .execution_options(populate_existing=True)
    )
    survey = result.scalar_one_or_none()
    if survey is None:
        raise NotFoundError("Survey", survey_id)
    return survey


async def list_surveys(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
) -> Tuple[List[models.Survey], int]:
    filters = []
    if category:
        filters.append(models.Survey.category == category)
    if is_active is not None:
        filters.append(models.Survey.is_active == is_active)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                models.Survey.title.ilike(pattern),
                models.Survey.description.ilike(pattern),
            )
        )

    total = await db.scalar(
        select(func.count(models.Survey.id)).where(*filters)
    )
    result = await db.execute(
        select(models.Survey)
        .options(selectinload(models.Survey.questions))
        .where(*filters)
        .order_by(models.Survey.created_at.desc(), models.Survey.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def create_survey(
    db: AsyncSession, survey_in: schemas.SurveyCreate
) -> models.Survey:
    db_survey = models.Survey(
        title=survey_in.title,
        description=survey_in.description,
        category=survey_in.category,
        tags=survey_in.tags,
        is_active=survey_in.is_active,
        created_by=survey_in.created_by,
        response_count=0,
        questions=_build_questions(survey_in.questions),
    )
    db.add(db_survey)
    await db.flush()
    logger.info(
        "Survey %s created with %d question(s)",
        db_survey.id,
        len(db_survey.questions),
    )
    return await get_survey(db, db_survey.id)


async def update_survey(
    db: AsyncSession, survey_id: int, survey_in: schemas.SurveyUpdate
) -> models.Survey:
    db_survey = await get_survey(db, survey_id)
    changes = survey_in.model_dump(exclude_unset=True, exclude={"questions"})

    for field, value in changes.items():
        if value is None:
            continue
        setattr(db_survey, field, value)

    if survey_in.questions is not None:
        new_questions = _build_questions(survey_in.questions)
        # old rows must be gone before re-inserting ids the client kept
        db_survey.questions = []
        await db.flush()
        db_survey.questions = new_questions

    db_survey.updated_at = func.now()
    await db.flush()
    logger.info("Survey %s updated (%s)", survey_id, ", ".join(survey_in.model_fields_set))
    return await get_survey(db, survey_id)


async def delete_survey(db: AsyncSession, survey_id: int) -> int:
    """Delete a survey with all its responses. Returns the number of responses removed."""
    db_survey = await get_survey(db, survey_id)

    response_ids = select(models.SurveyResponse.id).where(
        models.SurveyResponse.survey_id == survey_id
    )
    await db.execute(
        delete(models.Answer)
        .where(models.Answer.response_id.in_(response_ids))
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(
        delete(models.SurveyResponse).where(
            models.SurveyResponse.survey_id == survey_id
        )
        .execution_options(synchronize_session=False)
    )
    deleted_responses = result.rowcount or 0

    await db.delete(db_survey)
    await db.flush()
    logger.info(
        "Survey %s deleted together with %d response(s)", survey_id, deleted_responses
    )
    return deleted_responses


async def increment_response_count(
    db: AsyncSession, survey_id: int, delta: int = 1
) -> None:
    # single UPDATE so concurrent submissions cannot lose increments
    await db.execute(
        update(models.Survey)
        .where(models.Survey.id == survey_id)
        .values(response_count=models.Survey.response_count + delta)
        .execution_options(synchronize_session=False)
    )


async def get_response_count_status(
    db: AsyncSession, survey_id: int
) -> schemas.ResponseCountStatus:
    cached = await db.scalar(
        select(models.Survey.response_count).where(models.Survey.id == survey_id)
    )
    if cached is None:
        raise NotFoundError("Survey", survey_id)
    actual = await db.scalar(
        select(func.count(models.SurveyResponse.id)).where(
            models.SurveyResponse.survey_id == survey_id
        )
    )
    return schemas.ResponseCountStatus(
        survey_id=survey_id,
        cached_count=cached,
        actual_count=actual,
        in_sync=cached == actual,
    )


async def reconcile_response_count(
    db: AsyncSession, survey_id: int
) -> schemas.ResponseCountStatus:
    """Overwrite the cached response_count with the count from the response table."""
    status = await get_response_count_status(db, survey_id)
    if not status.in_sync:
        await db.execute(
            update(models.Survey)
            .where(models.Survey.id == survey_id)
            .values(response_count=status.actual_count)
            .execution_options(synchronize_session=False)
        )
        logger.warning(
            "Survey %s response_count drifted: cached %d, actual %d. Reset.",
            survey_id,
            status.cached_count,
            status.actual_count,
        )
    return status
