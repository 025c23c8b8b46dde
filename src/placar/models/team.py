"""Team model.

Only ``id`` and ``name`` matter to standings and scheduling; the remaining
fields come along when teams are loaded from the database.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Team(BaseModel):
    """A team registered in a championship, optionally placed in a group."""

    id: str
    name: str = Field(min_length=1)
    championship_id: str | None = None
    group_id: str | None = None
    logo_url: str | None = None
