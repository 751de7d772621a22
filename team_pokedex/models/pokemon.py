from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class AliasNames(BaseModel):
    english: Optional[str] = None
    french: Optional[str] = None


class AliasEntry(BaseModel):
    """One record of the pokedex.json alias reference dataset."""

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    name: Optional[AliasNames] = None


class PokemonMetadata(BaseModel):
    """What the PokéAPI tells us about a single Pokémon."""

    model_config = ConfigDict(frozen=True)

    image: Optional[str] = None
    description: str = ""
