# team_pokedex/clients/pokeapi_client.py

import asyncio
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from loguru import logger

from team_pokedex.config.settings import settings
from team_pokedex.models.pokemon import PokemonMetadata
from team_pokedex.utils.text_utils import sanitize_flavor_text
from .base_client import BaseApiClient


def select_artwork(pokemon_data: Dict[str, Any]) -> Optional[str]:
    """Official artwork if present, otherwise the default sprite."""
    sprites = pokemon_data.get("sprites") or {}
    artwork = ((sprites.get("other") or {}).get("official-artwork") or {}).get(
        "front_default"
    )
    if artwork is not None:
        return artwork
    return sprites.get("front_default")


def select_flavor_text(
    species_data: Dict[str, Any], languages: Sequence[str]
) -> str:
    """Picks the flavor text in the first available preferred language.

    Falls back to the first entry of any language, then to an empty string.
    """
    entries: List[Dict[str, Any]] = species_data.get("flavor_text_entries") or []

    for language in languages:
        for entry in entries:
            if (entry.get("language") or {}).get("name") == language:
                text = entry.get("flavor_text")
                if text is not None:
                    return sanitize_flavor_text(text)
                break

    if entries and entries[0].get("flavor_text") is not None:
        return sanitize_flavor_text(entries[0]["flavor_text"])
    return ""


class PokeApiClient(BaseApiClient):
    """Client for the PokéAPI pokemon and pokemon-species endpoints."""

    service_name: str = "PokéAPI"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.pokeapi_base_url.rstrip("/")

    def _url(self, resource: str, identifier: str) -> str:
        return f"{self.base_url}/{resource}/{quote(identifier, safe='')}"

    async def fetch_pokemon(self, identifier: str) -> Dict[str, Any]:
        return await self.get_json(self._url("pokemon", identifier))

    async def fetch_species(self, identifier: str) -> Dict[str, Any]:
        return await self.get_json(self._url("pokemon-species", identifier))

    async def fetch_metadata(self, identifier: str) -> PokemonMetadata:
        """Fetch artwork and description for a resolved identifier.

        Both endpoints are queried concurrently; if either fails the error
        propagates and nothing is returned.
        """
        pokemon_data, species_data = await asyncio.gather(
            self.fetch_pokemon(identifier), self.fetch_species(identifier)
        )

        image = select_artwork(pokemon_data)
        if not image:
            logger.warning(f"No artwork found for {identifier}.")

        description = select_flavor_text(species_data, settings.preferred_languages)
        return PokemonMetadata(image=image, description=description)
