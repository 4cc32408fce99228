"""
Client-side validation rules for ticket and comment forms

Rules are pydantic form models and run synchronously before any request is
issued. A failed check yields a mapping of field name to message; nothing is
sent to the server.
"""
from typing import Any, ClassVar, Dict, Mapping, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ticketdesk.errors import FormValidationError
from ticketdesk.models.schemas import CommentCreate, Priority, TicketCreate


class FormModel(BaseModel):
    """Base for form rule sets; ``labels`` names each field in messages"""
    model_config = ConfigDict(extra="ignore")

    labels: ClassVar[Dict[str, str]] = {}


class TicketCreateForm(FormModel):
    """Rules for the "create ticket" form"""
    title: str = Field(..., strict=True, min_length=4, max_length=100)
    description: str = Field(..., strict=True, min_length=10)
    priority: Priority
    reporter: str = Field(..., strict=True, min_length=2)

    labels: ClassVar[Dict[str, str]] = {
        "title": "Title",
        "description": "Description",
        "priority": "Priority",
        "reporter": "Reporter name",
    }


class CommentCreateForm(FormModel):
    """Rules for the "add comment" form"""
    author: str = Field(..., strict=True, min_length=2)
    body: str = Field(..., strict=True, min_length=2, max_length=500)

    labels: ClassVar[Dict[str, str]] = {
        "author": "Author name",
        "body": "Comment",
    }


def _message(label: str, error: Dict[str, Any]) -> str:
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "string_too_short":
        return f"{label} must be at least {ctx['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} must not exceed {ctx['max_length']} characters"
    if kind == "enum":
        return f"{label} must be one of {', '.join(p.value for p in Priority)}"
    return f"{label} is required"


def check_fields(form: Type[FormModel], data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Evaluate a form model against candidate form data

    Args:
        form: Form model holding the rules
        data: Candidate values (extra keys are ignored)

    Returns:
        Field name -> message for every failing field (empty when valid)
    """
    try:
        form.model_validate(dict(data))
    except PydanticValidationError as e:
        return _field_messages(form, e)
    return {}


def _field_messages(form: Type[FormModel], exc: PydanticValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0])
        if field not in errors:
            errors[field] = _message(form.labels.get(field, field), error)
    return errors


def _validate(form: Type[FormModel], data: Mapping[str, Any]) -> FormModel:
    try:
        return form.model_validate(dict(data))
    except PydanticValidationError as e:
        raise FormValidationError(_field_messages(form, e)) from e


def validate_ticket_create(data: Mapping[str, Any]) -> TicketCreate:
    """
    Validate ticket form data and build the creation payload

    Raises:
        FormValidationError: If any rule fails
    """
    form = _validate(TicketCreateForm, data)
    return TicketCreate(**form.model_dump())


def validate_comment_create(data: Mapping[str, Any]) -> CommentCreate:
    """
    Validate comment form data and build the creation payload

    Raises:
        FormValidationError: If any rule fails
    """
    form = _validate(CommentCreateForm, data)
    return CommentCreate(**form.model_dump())
