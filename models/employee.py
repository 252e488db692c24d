# models/employee.py
import re
from pydantic import BaseModel, ValidationError, field_validator
from typing import Any, Dict, List, Optional, Union
import config

DESIGNATIONS = ("Developer", "Manager", "Designer", "Tester", "HR")
GENDERS = ("Male", "Female", "Other")
COURSES = ("BCA", "MCA", "BSC")

SORTABLE_FIELDS = (
    "name", "email", "mobile", "designation", "gender", "course", "createDate", "active",
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MOBILE_RE = re.compile(r"[0-9]+")


def normalize_courses(value: Union[str, List[str], None]) -> List[str]:
    """
    Turn the wire value of `course` (one string or a list) into the stored form:
    a list of known course codes, duplicates dropped, first-seen order kept.
    """
    if value is None:
        raise ValueError("At least one course is required")
    items = [value] if isinstance(value, str) else list(value)

    courses: List[str] = []
    for item in items:
        code = str(item).strip()
        if not code:
            continue
        if code not in COURSES:
            raise ValueError(f"Invalid course: {code}. Allowed values: {', '.join(COURSES)}")
        if code not in courses:
            courses.append(code)

    if not courses:
        raise ValueError("At least one course is required")
    return courses


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


def _clean_email(v: str) -> str:
    v = v.strip().lower()
    if not _EMAIL_RE.match(v):
        raise ValueError("Please enter a valid email address")
    return v


def _clean_mobile(v: str) -> str:
    v = v.strip()
    if not _MOBILE_RE.fullmatch(v):
        raise ValueError("Mobile number must contain only digits")
    if len(v) < config.MOBILE_MIN_LENGTH:
        raise ValueError(f"Mobile number must be at least {config.MOBILE_MIN_LENGTH} digits")
    return v


def _clean_choice(v: str, allowed, label: str) -> str:
    v = v.strip()
    if v not in allowed:
        raise ValueError(f"Invalid {label}: {v}. Allowed values: {', '.join(allowed)}")
    return v


class EmployeeCreate(BaseModel):
    name: str
    email: str
    mobile: str
    designation: str
    gender: str
    course: List[str]

    @field_validator("course", mode="before")
    @classmethod
    def _course(cls, v):
        return normalize_courses(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return _clean_email(v)

    @field_validator("mobile")
    @classmethod
    def _mobile(cls, v):
        return _clean_mobile(v)

    @field_validator("designation")
    @classmethod
    def _designation(cls, v):
        return _clean_choice(v, DESIGNATIONS, "designation")

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        return _clean_choice(v, GENDERS, "gender")


class EmployeeUpdate(BaseModel):
    # Partial update: only fields that are not None get written
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    designation: Optional[str] = None
    gender: Optional[str] = None
    course: Optional[List[str]] = None

    @field_validator("course", mode="before")
    @classmethod
    def _course(cls, v):
        return None if v is None else normalize_courses(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return None if v is None else _clean_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return None if v is None else _clean_email(v)

    @field_validator("mobile")
    @classmethod
    def _mobile(cls, v):
        return None if v is None else _clean_mobile(v)

    @field_validator("designation")
    @classmethod
    def _designation(cls, v):
        return None if v is None else _clean_choice(v, DESIGNATIONS, "designation")

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        return None if v is None else _clean_choice(v, GENDERS, "gender")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def describe_validation_error(exc: ValidationError) -> str:
    """First error of a pydantic ValidationError as a single readable message."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    err = errors[0]
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
    field = ".".join(loc)
    if err.get("type") == "missing":
        return f"Missing required field: {field}"
    msg = err.get("msg", "Invalid input")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    return f"{field}: {msg}" if field else msg
