"""Pydantic request/response schemas for the Tutoring API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class BookSessionRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tutor_id": "7",
                    "student_id": "9",
                    "subject": "Calculus",
                    "date": "2025-03-10",
                    "time": "16:00",
                    "price": 20000,
                    "modality": "online",
                }
            ]
        }
    }

    tutor_id: str | None = None
    student_id: str | None = None
    subject: str | None = Field(None, max_length=100)
    date: dt.date | None = None
    time: str | None = Field(None, max_length=8)
    price: float | None = Field(None, ge=0)
    duration: int | None = Field(None, ge=1)
    modality: Literal["online", "in_person"] | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class SessionResponse(BaseModel):
    session_id: str
    tutor_id: str
    student_id: str
    subject: str
    date: dt.date
    time: str
    duration: int
    price: float
    modality: str
    notes: str
    status: str


class LifecycleResponse(BaseModel):
    session_id: str
    status: str
    propagation: Literal["pending", "published", "failed"] = "pending"
