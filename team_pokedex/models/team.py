# team_pokedex/models/team.py
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from team_pokedex.utils.text_utils import sanitize_flavor_text


class Row(NamedTuple):
    """One parsed input line: who owns which Pokémon."""

    person: str
    species_raw_name: str


class TeamRecord(BaseModel):
    """A single card of the team page, as written to data.json."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Team member's name.")
    pokemon: str = Field(..., min_length=1, description="Title-cased Pokémon name.")
    image: Optional[str] = Field(None, description="Artwork URL, if any was found.")
    description: str = Field("", description="Sanitized flavor text.")

    @field_validator("description", mode="before")
    @classmethod
    def _clean_description(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return sanitize_flavor_text(value)
        # Left for the str check to reject with a ValidationError
        return value
