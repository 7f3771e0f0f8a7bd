"""
Request payloads for the domain facade.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import EmailStr, Field, model_validator

from portfolio_client.services.types import WireModel


class LoginCredentials(WireModel):
    email: EmailStr
    password: str = Field(min_length=1)
    remember_me: bool | None = None
    captcha: str | None = None


class RegisterData(WireModel):
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    accept_terms: bool
    newsletter: bool | None = None

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterData":
        if self.password != self.confirm_password:
            raise ValueError("passwords do not match")
        return self


class PasswordResetRequest(WireModel):
    email: EmailStr
    captcha: str | None = None


class PasswordResetConfirm(WireModel):
    token: str
    password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordResetConfirm":
        if self.password != self.confirm_password:
            raise ValueError("passwords do not match")
        return self


class ContactMessageInput(WireModel):
    """Message sent through a portfolio's contact form."""

    portfolio_id: str
    name: str
    email: EmailStr
    message: str = Field(min_length=1)
    subject: str | None = None
    phone: str | None = None
    company: str | None = None
    budget: str | None = None
    timeline: str | None = None
    project_type: str | None = None


AnalyticsEventType = Literal[
    "page_view",
    "project_view",
    "contact_form_submit",
    "resume_download",
    "social_link_click",
    "external_link_click",
    "scroll_depth",
    "time_on_page",
    "bounce",
    "conversion",
]


class AnalyticsEventInput(WireModel):
    """Client-side analytics event."""

    portfolio_id: str
    type: AnalyticsEventType
    name: str
    session_id: str
    properties: dict[str, Any] | None = None
    user_id: str | None = None
    page: str | None = None
    referrer: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


class AnalyticsQuery(WireModel):
    """Time window and grouping for analytics reports."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    portfolio_id: str | None = None
    granularity: Literal["hour", "day", "week", "month"] | None = None

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_body(payload: WireModel | dict[str, Any]) -> dict[str, Any]:
    """Serialize a payload model (or pass a dict through) for a JSON body."""
    if isinstance(payload, WireModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(payload)
