from sqlalchemy import (
    Column,
    Integer,
    Float,
    String,
    Text,
    DateTime,
    Boolean,
    JSON,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


QUESTION_TYPES = ("multiple-choice", "text", "rating", "checkbox")
SURVEY_CATEGORIES = (
    "technology",
    "entertainment",
    "business",
    "education",
    "health",
    "other",
)


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by = Column(String, nullable=True)

    # Cache of len(responses); incremented on insert, repaired by reconcile
    response_count = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    questions = relationship(
        "SurveyQuestion",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="SurveyQuestion.order",
    )
    responses = relationship(
        "SurveyResponse",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SurveyQuestion(Base):
    __tablename__ = "survey_questions"
    __table_args__ = (
        # question ids are only unique inside their survey
        UniqueConstraint("survey_id", "question_id", name="uq_survey_question_id"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(
        Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False
    )
    question_id = Column(String(64), nullable=False)
    type = Column(String(32), nullable=False)
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)
    required = Column(Boolean, nullable=False, default=False)
    order = Column(Integer, nullable=False, default=0)

    survey = relationship("Survey", back_populates="questions")


class SurveyResponse(Base):
    __tablename__ = "survey_responses"
    __table_args__ = (
        Index("ix_survey_responses_survey_submitted", "survey_id", "submitted_at"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    survey_id = Column(
        Integer,
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    submitted_at = Column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String, nullable=True)
    completion_time = Column(Float, nullable=True)  # seconds
    is_complete = Column(Boolean, nullable=False, default=True)

    survey = relationship("Survey", back_populates="responses")
    answers = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
        order_by="Answer.pk",
    )


class Answer(Base):
    __tablename__ = "answers"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    response_id = Column(
        Integer,
        ForeignKey("survey_responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id = Column(String(64), nullable=False)
    # copy of the question type at submission time
    question_type = Column(String(32), nullable=False)
    value = Column(JSON)  # str, list of str or number, depending on question_type

    response = relationship("SurveyResponse", back_populates="answers")
