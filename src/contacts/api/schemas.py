"""Pydantic request/response schemas for the Contacts API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SaveContactRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Thandi Mokoena",
                    "email": "thandi@example.co.za",
                    "phone": "+27 82 555 0199",
                    "source": "contact_form",
                    "notes": "Asked about foundation shades",
                    "subscribed": True,
                }
            ]
        }
    }

    contact_id: str | None = None
    name: str | None = Field(None, max_length=200)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=30)
    source: str | None = None
    notes: str | None = None
    subscribed: bool = True


class ContactIdResponse(BaseModel):
    contact_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ContactResponse(BaseModel):
    contact_id: str
    name: str | None = None
    email: str
    phone: str | None = None
    source: str
    notes: str | None = None
    subscribed: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
