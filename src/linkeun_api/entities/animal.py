"""Animal domain entity."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AnimalEntity(BaseModel):
    """Snapshot of one row of the ``animals`` table.

    Built from ORM rows by the SQL repository and round-tripped through the
    cache as JSON, so the same type comes back on a hit and on a miss.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    species: str
    age: int = 0
    description: str = ""
    created_at: datetime
    updated_at: datetime
