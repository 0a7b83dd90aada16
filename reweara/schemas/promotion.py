# reweara/schemas/promotion.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from reweara.core.clock import as_utc

PopupTrigger = Literal["page_load", "time_delay", "exit_intent"]
ShowFrequency = Literal["once", "daily", "weekly", "always"]
PopupPosition = Literal["center", "top", "bottom"]
PopupSize = Literal["small", "medium", "large"]


def _clean_pages(pages: list[str]) -> list[str]:
    cleaned: list[str] = []
    for page in pages:
        page = page.strip()
        if page and page not in cleaned:
            cleaned.append(page)
    return cleaned


class PromotionalPopupCreate(SQLModel):
    """
    Admin payload for a new popup.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=255)
    description: str | None = None
    image_url: str | None = None
    button_text: str | None = None
    button_url: str | None = None
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    button_color: str = "#10b981"
    position: PopupPosition = "center"
    size: PopupSize = "medium"
    trigger: PopupTrigger = "page_load"
    trigger_value: int = Field(default=0, ge=0)
    show_frequency: ShowFrequency = "once"
    target_pages: list[str] = []
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True
    priority: int = 0

    @field_validator("title")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v

    @field_validator("target_pages")
    @classmethod
    def normalize_pages(cls, v: list[str]) -> list[str]:
        return _clean_pages(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class PromotionalPopupUpdate(SQLModel):
    """
    Partial update payload; omitted fields are left unchanged.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    image_url: str | None = None
    button_text: str | None = None
    button_url: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    button_color: str | None = None
    position: PopupPosition | None = None
    size: PopupSize | None = None
    trigger: PopupTrigger | None = None
    trigger_value: int | None = Field(default=None, ge=0)
    show_frequency: ShowFrequency | None = None
    target_pages: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    priority: int | None = None

    @field_validator("target_pages")
    @classmethod
    def normalize_pages(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return _clean_pages(v)


class PromotionalPopupRead(SQLModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    image_url: str | None = None
    button_text: str | None = None
    button_url: str | None = None
    background_color: str
    text_color: str
    button_color: str
    position: PopupPosition
    size: PopupSize
    trigger: PopupTrigger
    trigger_value: int = 0
    show_frequency: ShowFrequency
    target_pages: list[str] = []
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool
    priority: int = 0


class BannerCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    subtitle: str | None = None
    image_url: str
    link_url: str | None = None
    button_text: str | None = None
    position: str = "hero"
    sort_order: int = 0
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class BannerUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    subtitle: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    button_text: str | None = None
    position: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class BannerRead(SQLModel):
    id: uuid.UUID
    title: str | None = None
    subtitle: str | None = None
    image_url: str
    link_url: str | None = None
    button_text: str | None = None
    position: str
    sort_order: int = 0
    is_active: bool
    start_date: datetime | None = None
    end_date: datetime | None = None
