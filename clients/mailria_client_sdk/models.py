from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AccountRow(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: int = Field(alias="ID")
    email: str = Field(alias="Email")
    last_login: datetime | None = Field(default=None, alias="LastLogin")
    created_at: datetime | None = Field(default=None, alias="CreatedAt")
    created_by_name: str | None = Field(default=None, alias="CreatedByName")


class AccountPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    users: List[AccountRow]
    total_pages: int = Field(default=1, ge=0)
    total_count: int = Field(default=0, ge=0)
    active_count: int | None = None


class BulkCreateRequest(BaseModel):
    base_name: str = "random"
    quantity: int
    password: str
    send_to: str = ""
    domain: str = "mailria.com"


class ChangePasswordRequest(BaseModel):
    user_id: int
    new_password: str
    old_password: str = ""


class CreateAdminRequest(BaseModel):
    username: str
    password: str


class Attachment(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    filename: str = Field(alias="Filename")
    url: str = Field(alias="URL")


class EmailSummary(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int = Field(alias="ID")
    sender_name: str = Field(default="", alias="SenderName")
    sender_email: str | None = Field(default=None, alias="SenderEmail")
    subject: str = Field(default="", alias="Subject")
    preview: str | None = Field(default=None, alias="Preview")
    relative_time: str | None = Field(default=None, alias="RelativeTime")
    is_read: bool = Field(default=False, alias="IsRead")


class EmailDetail(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int = Field(alias="ID")
    sender_email: str = Field(default="", alias="SenderEmail")
    sender_name: str = Field(default="", alias="SenderName")
    subject: str = Field(default="", alias="Subject")
    body: str = Field(default="", alias="Body")
    body_eml: str | None = Field(default=None, alias="BodyEml")
    relative_time: str | None = Field(default=None, alias="RelativeTime")
    attachments: List[Attachment] = Field(default_factory=list, alias="ListAttachments")


class SentSummary(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    sent_emails: int = Field(default=0, alias="SentEmails")
    email: str = Field(default="", alias="Email")


class SessionData(BaseModel):
    access_token: str
    role_id: Optional[int] = None
    email: str | None = None
