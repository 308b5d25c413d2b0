from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base for all API bodies - JSON keys are camelCase, Python attributes snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Error responses (documented on routes; bodies are produced by the exception handlers)
class ErrorResponse(CamelModel):
    error: str
    message: str


class NotFoundResponse(ErrorResponse):
    entity: Optional[str] = None
    entity_id: Optional[str] = None


class SeatsUnavailableResponse(ErrorResponse):
    unavailable_seats: List[str]


class ScheduleConflictResponse(ErrorResponse):
    conflicting_session_id: str
