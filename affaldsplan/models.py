"""
This module defines the data models for the calendar service.
"""

import hashlib
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Material:
    """A waste fraction registered for an address at Renoweb."""

    material_id: int
    name: str


@dataclass(frozen=True)
class CalendarEvent:
    """Represents a single waste collection event in the generated calendar."""

    title: str
    date: date
    uid: str
    created: datetime
    alarm_at: datetime

    @staticmethod
    def compute_uid(material: str, pickup_date: date, domain: str) -> str:
        """SHA1 of material name and ISO date, qualified with the UID domain."""
        raw = f"{material}{pickup_date.isoformat()}"
        return f"{hashlib.sha1(raw.encode('utf-8')).hexdigest()}@{domain}"


@dataclass(frozen=True)
class CalendarArtifact:
    """A stored calendar document together with its cache metadata."""

    cache_key: str
    data: bytes
    created_at: datetime


@dataclass(frozen=True)
class RenderedCalendar:
    """A calendar artifact serialized for delivery to a client."""

    body: bytes
    mimetype: str
    last_modified: datetime
    filename: Optional[str] = None
