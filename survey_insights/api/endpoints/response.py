from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...crud import crud_response, crud_survey
from ...database import get_db_session
from ...schemas import ResponseCreate, ResponseListResponse, ResponseRead

router = APIRouter()


@router.get("", response_model=ResponseListResponse)
async def read_all_responses(
    survey_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
):
    responses, total = await crud_response.list_responses(
        db, survey_id=survey_id, page=page, limit=limit
    )
    return ResponseListResponse(
        responses=[ResponseRead.model_validate(r) for r in responses],
        pagination=crud_survey.pagination(page, limit, total),
    )


@router.post("", response_model=ResponseRead, status_code=status.HTTP_201_CREATED)
async def create_response_item(
    resp_in: ResponseCreate,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    db_resp = await crud_response.create_response(
        db,
        resp_in,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return ResponseRead.model_validate(db_resp)


@router.get("/survey/{survey_id}", response_model=ResponseListResponse)
async def read_survey_responses(
    survey_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
):
    await crud_survey.get_survey(db, survey_id)  # 404 for unknown surveys
    responses, total = await crud_response.list_responses(
        db, survey_id=survey_id, page=page, limit=limit
    )
    return ResponseListResponse(
        responses=[ResponseRead.model_validate(r) for r in responses],
        pagination=crud_survey.pagination(page, limit, total),
    )


@router.get("/{r_id}", response_model=ResponseRead)
async def read_response_item(r_id: int, db: AsyncSession = Depends(get_db_session)):
    db_resp = await crud_response.get_response(db, r_id)
    return ResponseRead.model_validate(db_resp)
