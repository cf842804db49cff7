from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...crud import crud_survey
from ...database import get_db_session
from ...schemas import (
    Category,
    ResponseCountStatus,
    SurveyCreate,
    SurveyDeleteResponse,
    SurveyListResponse,
    SurveyRead,
    SurveyUpdate,
)

router = APIRouter()


@router.get("", response_model=SurveyListResponse)
async def read_all_surveys(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[Category] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
):
    surveys, total = await crud_survey.list_surveys(
        db,
        page=page,
        limit=limit,
        category=category,
        is_active=is_active,
        search=search,
    )
    return SurveyListResponse(
        surveys=[crud_survey.survey_to_schema(s) for s in surveys],
        pagination=crud_survey.pagination(page, limit, total),
    )


@router.post("", response_model=SurveyRead, status_code=status.HTTP_201_CREATED)
async def create_survey_item(
    survey_in: SurveyCreate, db: AsyncSession = Depends(get_db_session)
):
    db_survey = await crud_survey.create_survey(db, survey_in)
    return crud_survey.survey_to_schema(db_survey)


@router.get("/{survey_id}", response_model=SurveyRead)
async def read_survey_item(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    db_survey = await crud_survey.get_survey(db, survey_id)
    return crud_survey.survey_to_schema(db_survey)


@router.put("/{survey_id}", response_model=SurveyRead)
async def update_survey_item(
    survey_id: int, survey_in: SurveyUpdate, db: AsyncSession = Depends(get_db_session)
):
    db_survey = await crud_survey.update_survey(db, survey_id, survey_in)
    return crud_survey.survey_to_schema(db_survey)


@router.delete("/{survey_id}", response_model=SurveyDeleteResponse)
async def delete_survey_item(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    deleted_responses = await crud_survey.delete_survey(db, survey_id)
    return SurveyDeleteResponse(survey_id=survey_id, deleted_responses=deleted_responses)


@router.get("/{survey_id}/response-count", response_model=ResponseCountStatus)
async def read_response_count(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    return await crud_survey.get_response_count_status(db, survey_id)


@router.post("/{survey_id}/response-count/reconcile", response_model=ResponseCountStatus)
async def reconcile_response_count(
    survey_id: int, db: AsyncSession = Depends(get_db_session)
):
    return await crud_survey.reconcile_response_count(db, survey_id)
