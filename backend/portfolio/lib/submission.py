from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

FIELD_MESSAGES: Dict[str, str] = {
    "name": "Name must be at least 2 characters",
    "email": "Invalid email address",
    "subject": "Subject must be at least 2 characters",
    "message": "Message must be at least 10 characters",
}
REQUIRED_MESSAGE = "Required"


class Submission(BaseModel):
    """One contact form payload. Lives for a single request, never stored as-is."""

    name: str = Field(min_length=2)
    email: EmailStr
    subject: str = Field(min_length=2)
    message: str = Field(min_length=10)

    @field_validator("email", mode="before")
    @classmethod
    def _bare_address(cls, value: Any) -> Any:
        # EmailStr would accept "Name <addr>" and keep only addr
        if isinstance(value, str) and any(c in value for c in "<>"):
            raise ValueError("display names are not accepted")
        return value


def field_errors(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__root__"
        if field in errors:
            continue
        if err.get("type") == "missing":
            errors[field] = REQUIRED_MESSAGE
            continue
        errors[field] = FIELD_MESSAGES.get(field, err.get("msg", "Invalid value"))
    return errors


def validate_submission(data: Any) -> Tuple[Optional[Submission], Dict[str, str]]:
    if not isinstance(data, dict):
        return None, {"__root__": "Submission must be a JSON object"}
    try:
        return Submission.model_validate(data), {}
    except ValidationError as exc:
        return None, field_errors(exc)
