"""
Per-question statistics over a survey's responses.

Everything here is a pure function of the survey definition and the list of
responses handed in. Nothing is read from or written to the database, so the
functions work the same on ORM rows and on plain in-memory objects.
"""
import logging
import math
from collections import Counter
from typing import Any, Iterable, List, Optional, Sequence

from ..schemas import (
    CheckboxAnalytics,
    CompletionStats,
    MultipleChoiceAnalytics,
    QuestionAnalytics,
    RatingAnalytics,
    TextAnalytics,
)

logger = logging.getLogger(__name__)


def _is_present(value: Any) -> bool:
    # 0 is a valid rating, so this is not a plain truthiness check
    if value is None:
        return False
    if isinstance(value, (str, list, tuple)) and len(value) == 0:
        return False
    return True


def _to_number(value: Any) -> Optional[float]:
    """Numeric reading of a stored rating, None when it has none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _rating_key(number: float):
    # 5.0 is reported as 5
    return int(number) if number.is_integer() else number


def collect_answer_values(question_id: str, responses: Iterable) -> List[Any]:
    """
    Values given for one question, one per response at most.

    When a response carries several answers for the same question id only the
    first counts. Absent values (None, "", []) are dropped.
    """
    values = []
    for response in responses:
        for answer in response.answers:
            if answer.question_id == question_id:
                if _is_present(answer.value):
                    values.append(answer.value)
                break
    return values


def _multiple_choice(question, values: List[Any]) -> MultipleChoiceAnalytics:
    # values outside question.options are counted as well
    distribution = Counter(v for v in values if isinstance(v, str))
    return MultipleChoiceAnalytics(
        question_id=question.question_id,
        question=question.text,
        total_responses=len(values),
        answer_distribution=dict(distribution),
    )


def _rating(question, values: List[Any]) -> RatingAnalytics:
    ratings = [n for n in (_to_number(v) for v in values) if n is not None]
    skipped = len(values) - len(ratings)
    if skipped:
        logger.debug(
            "Question %s: %d non-numeric rating(s) left out of the average",
            question.question_id,
            skipped,
        )
    # total_responses keeps the skipped values, only the average drops them
    average = sum(ratings) / len(ratings) if ratings else 0
    return RatingAnalytics(
        question_id=question.question_id,
        question=question.text,
        total_responses=len(values),
        average_rating=average,
        rating_distribution=dict(Counter(_rating_key(r) for r in ratings)),
    )


def _checkbox(question, values: List[Any]) -> CheckboxAnalytics:
    selected = Counter()
    for value in values:
        if isinstance(value, (list, tuple)):
            selected.update(option for option in value if isinstance(option, str))
    return CheckboxAnalytics(
        question_id=question.question_id,
        question=question.text,
        total_responses=len(values),
        option_distribution=dict(selected),
    )


def _text(question, values: List[Any]) -> TextAnalytics:
    return TextAnalytics(
        question_id=question.question_id,
        question=question.text,
        total_responses=len(values),
    )


AGGREGATORS = {
    "multiple-choice": _multiple_choice,
    "rating": _rating,
    "checkbox": _checkbox,
    "text": _text,
}


def compute_question_analytics(survey, responses: Sequence) -> List[QuestionAnalytics]:
    """
    One analytics entry per question of ``survey``, in question order.

    Answers that point at question ids the survey no longer has simply match
    nothing. Malformed values are skipped by the rule of their question type,
    so the computation never fails on stored data.
    """
    questions = sorted(survey.questions, key=lambda q: q.order or 0)
    results = []
    for question in questions:
        values = collect_answer_values(question.question_id, responses)
        aggregate = AGGREGATORS.get(question.type, _text)
        results.append(aggregate(question, values))
    return results


def compute_completion_stats(responses: Iterable) -> Optional[CompletionStats]:
    """Average, min and max completion time, or None without any timing data."""
    times = [
        r.completion_time for r in responses if r.completion_time is not None
    ]
    if not times:
        return None
    return CompletionStats(
        avg_completion_time=sum(times) / len(times),
        min_completion_time=min(times),
        max_completion_time=max(times),
    )
