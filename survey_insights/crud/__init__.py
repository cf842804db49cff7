from . import crud_survey, crud_response  # noqa: F401
