from datetime import datetime, timezone
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


QuestionType = Literal["multiple-choice", "text", "rating", "checkbox"]
Category = Literal[
    "technology", "entertainment", "business", "education", "health", "other"
]

CHOICE_TYPES = ("multiple-choice", "checkbox")


def _assume_utc(value):
    # SQLite drops the offset, every timestamp is written in UTC
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# --- Survey definition ---


class QuestionBase(BaseModel):
    type: QuestionType
    question: str = Field(..., min_length=1)
    options: Optional[List[str]] = None
    required: bool = False

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v):
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_options(self):
        if self.type in CHOICE_TYPES:
            # blank options are dropped, the rest stored trimmed
            self.options = [o.strip() for o in self.options or [] if o.strip()]
            if not self.options:
                raise ValueError(f'options are required for "{self.type}" questions')
        else:
            # options carry no meaning for text and rating questions
            self.options = None
        return self


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(QuestionBase):
    # existing questions keep their id, new ones get one generated
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)


class QuestionRead(QuestionBase):
    id: str
    order: int


class SurveyCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    category: Category
    questions: List[QuestionCreate] = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_by: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _dedupe_tags(v)


class SurveyUpdate(BaseModel):
    """Partial update, only the fields that were sent are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    category: Optional[Category] = None
    questions: Optional[List[QuestionUpdate]] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _dedupe_tags(v) if v is not None else v


def _dedupe_tags(tags: List[str]) -> List[str]:
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class SurveyRead(BaseModel):
    id: int
    title: str
    description: str
    category: Category
    questions: List[QuestionRead] = []
    tags: List[str] = []
    is_active: bool
    created_by: Optional[str] = None
    response_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_in_utc(cls, v):
        return _assume_utc(v)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class SurveyListResponse(BaseModel):
    surveys: List[SurveyRead]
    pagination: Pagination


class SurveyDeleteResponse(BaseModel):
    survey_id: int
    deleted_responses: int
    message: str = "Survey deleted successfully."


class ResponseCountStatus(BaseModel):
    survey_id: int
    cached_count: int
    actual_count: int
    in_sync: bool


# --- Responses ---
# One variant per question type. The question_type tag picks the variant, so a
# submitted value always has the shape its question type demands.


class MultipleChoiceAnswer(BaseModel):
    question_id: str = Field(..., min_length=1)
    question_type: Literal["multiple-choice"]
    value: str = Field(..., min_length=1)


class TextAnswer(BaseModel):
    question_id: str = Field(..., min_length=1)
    question_type: Literal["text"]
    value: str


class RatingAnswer(BaseModel):
    question_id: str = Field(..., min_length=1)
    question_type: Literal["rating"]
    value: float = Field(..., allow_inf_nan=False)


class CheckboxAnswer(BaseModel):
    question_id: str = Field(..., min_length=1)
    question_type: Literal["checkbox"]
    value: List[str] = Field(..., min_length=1)


AnswerIn = Annotated[
    Union[MultipleChoiceAnswer, TextAnswer, RatingAnswer, CheckboxAnswer],
    Field(discriminator="question_type"),
]


class ResponseCreate(BaseModel):
    survey_id: int
    answers: List[AnswerIn] = Field(..., min_length=1)
    completion_time: Optional[float] = Field(default=None, ge=0)
    is_complete: Optional[bool] = None


class AnswerRead(BaseModel):
    question_id: str
    question_type: QuestionType
    value: Union[str, List[str], float, int, None] = None

    model_config = ConfigDict(from_attributes=True)


class ResponseRead(BaseModel):
    id: int
    survey_id: int
    answers: List[AnswerRead] = []
    submitted_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    completion_time: Optional[float] = None
    is_complete: bool

    model_config = ConfigDict(from_attributes=True)

    @field_validator("submitted_at")
    @classmethod
    def submitted_in_utc(cls, v):
        return _assume_utc(v)


class ResponseListResponse(BaseModel):
    responses: List[ResponseRead]
    pagination: Pagination


# --- Analytics ---


class TrendBucket(BaseModel):
    year: int
    month: int
    day: int
    count: int


class CompletionStats(BaseModel):
    avg_completion_time: float
    min_completion_time: float
    max_completion_time: float


class _QuestionAnalyticsBase(BaseModel):
    question_id: str
    question: str
    total_responses: int


class MultipleChoiceAnalytics(_QuestionAnalyticsBase):
    type: Literal["multiple-choice"] = "multiple-choice"
    answer_distribution: Dict[str, int] = Field(default_factory=dict)


class RatingAnalytics(_QuestionAnalyticsBase):
    type: Literal["rating"] = "rating"
    average_rating: float = 0
    rating_distribution: Dict[Union[int, float], int] = Field(default_factory=dict)


class CheckboxAnalytics(_QuestionAnalyticsBase):
    type: Literal["checkbox"] = "checkbox"
    option_distribution: Dict[str, int] = Field(default_factory=dict)


class TextAnalytics(_QuestionAnalyticsBase):
    type: Literal["text"] = "text"


QuestionAnalytics = Annotated[
    Union[MultipleChoiceAnalytics, RatingAnalytics, CheckboxAnalytics, TextAnalytics],
    Field(discriminator="type"),
]


class SurveyIdentity(BaseModel):
    id: int
    title: str
    category: Category
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def created_in_utc(cls, v):
        return _assume_utc(v)


class SurveyAnalyticsReport(BaseModel):
    survey: SurveyIdentity
    total_responses: int
    response_trends: List[TrendBucket] = []
    completion_stats: Optional[CompletionStats] = None
    question_analytics: List[QuestionAnalytics] = []


class OverviewStats(BaseModel):
    total_surveys: int
    active_surveys: int
    total_responses: int
    average_responses_per_survey: int


class CategoryCount(BaseModel):
    category: str
    count: int


class TopSurvey(BaseModel):
    id: int
    title: str
    response_count: int
    category: str


class OverviewReport(BaseModel):
    overview: OverviewStats
    surveys_by_category: List[CategoryCount] = []
    response_trends: List[TrendBucket] = []
    top_surveys: List[TopSurvey] = []
