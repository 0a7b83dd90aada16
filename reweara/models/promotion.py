# reweara/models/promotion.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class PromotionalPopup(SQLModel, table=True):
    """
    Marketing popup.

    Display rules are evaluated client-side (see
    reweara.storefront.promotions):
      - trigger: page_load | time_delay | exit_intent
      - trigger_value: delay in seconds for time_delay
      - show_frequency: once | daily | weekly | always
      - target_pages: route paths, "*" for every page, empty for every page
      - priority: higher wins
    """

    __tablename__ = "promotional_popups"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    title: str = Field(max_length=255)
    description: str | None = None
    image_url: str | None = None
    button_text: str | None = None
    button_url: str | None = None

    background_color: str = Field(default="#ffffff")
    text_color: str = Field(default="#000000")
    button_color: str = Field(default="#10b981")

    # center | bottom | top
    position: str = Field(default="center")
    # small | medium | large
    size: str = Field(default="medium")

    trigger: str = Field(default="page_load")
    trigger_value: int = Field(default=0, ge=0)
    show_frequency: str = Field(default="once")

    target_pages: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON),
    )

    start_date: datetime | None = None
    end_date: datetime | None = None

    is_active: bool = Field(default=True, index=True)
    priority: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Banner(SQLModel, table=True):
    """
    Announcement bar shown across the top of every page.
    Higher sort_order is shown first; shoppers may dismiss it.
    """

    __tablename__ = "banners"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    title: str | None = Field(default=None, max_length=255)
    subtitle: str | None = None
    image_url: str
    link_url: str | None = None
    button_text: str | None = None

    # hero | sidebar | footer
    position: str = Field(default="hero")
    sort_order: int = Field(default=0)

    is_active: bool = Field(default=True, index=True)
    start_date: datetime | None = None
    end_date: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
