from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...analytics import get_overview_analytics, get_survey_analytics
from ...database import get_db_session
from ...schemas import OverviewReport, SurveyAnalyticsReport

router = APIRouter()


@router.get("/overview", response_model=OverviewReport)
async def read_overview(db: AsyncSession = Depends(get_db_session)):
    return await get_overview_analytics(db)


@router.get("/survey/{survey_id}", response_model=SurveyAnalyticsReport)
async def read_survey_analytics(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    return await get_survey_analytics(db, survey_id)
