"""Flower domain entity."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FlowerEntity(BaseModel):
    """Snapshot of one row of the ``flowers`` table."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    species: str
    color: str
    description: str = ""
    seasonal: bool = False
    created_at: datetime
    updated_at: datetime
