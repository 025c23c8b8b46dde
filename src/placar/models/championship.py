"""Championship, Group and Round models.

Allowed values mirror the choices offered by the championship settings form.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SportType = Literal["futebol_de_campo", "fut7", "futsal"]
Gender = Literal["masculino", "feminino", "misto"]
AgeCategory = Literal["infantil", "jovem", "adulto"]
RoundType = Literal["group_stage", "round_of_16", "quarter_finals", "semi_finals", "final"]
TieBreaker = Literal["points", "goal_difference", "goals_for"]

DEFAULT_TIE_BREAKER_ORDER: list[TieBreaker] = ["points", "goal_difference", "goals_for"]


class Championship(BaseModel):
    """A competition owning groups, rounds, teams and matches.

    ``tie_breaker_order`` is kept for display only. Standings always rank by
    points, goal difference and goals for, in that order.
    """

    id: str
    name: str = Field(min_length=1)
    description: str | None = None
    city: str | None = None
    state: str | None = None
    logo_url: str | None = None
    points_for_win: Literal[2, 3] = 3
    sport_type: SportType = "futebol_de_campo"
    gender: Gender = "masculino"
    age_category: AgeCategory = "adulto"
    tie_breaker_order: list[TieBreaker] = Field(
        default_factory=lambda: list(DEFAULT_TIE_BREAKER_ORDER)
    )
    created_at: datetime | None = None


class Group(BaseModel):
    """A subset of a championship's teams that play each other."""

    id: str
    name: str = Field(min_length=1)
    championship_id: str


class Round(BaseModel):
    """A named stage of a championship; ``order_index`` drives display order."""

    id: str
    name: str = Field(min_length=1)
    order_index: int = Field(default=0, ge=0)
    type: RoundType = "group_stage"
    championship_id: str
