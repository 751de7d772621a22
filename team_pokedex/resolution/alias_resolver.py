import asyncio
from typing import Any, Dict, Iterable, Optional

from loguru import logger
from pydantic import ValidationError

from team_pokedex.clients.base_client import BaseApiClient
from team_pokedex.config.settings import settings
from team_pokedex.models.pokemon import AliasEntry, AliasNames
from team_pokedex.utils.text_utils import normalize_name, slugify_name

# Key: normalized spelling (id, english, french, slug), Value: PokéAPI id
AliasMap = Dict[str, str]


def build_alias_map(raw_entries: Iterable[Any]) -> AliasMap:
    """Builds the alias table from pokedex.json style records."""
    alias_map: AliasMap = {}
    skipped = 0

    for raw_entry in raw_entries:
        try:
            entry = AliasEntry.model_validate(raw_entry)
        except ValidationError:
            skipped += 1
            continue

        canonical_id = str(entry.id)
        names = entry.name or AliasNames()
        english = names.english or ""
        french = names.french or ""

        for variant in (canonical_id, english, french, slugify_name(english)):
            key = normalize_name(variant) if variant else ""
            if key:
                alias_map[key] = canonical_id

    if skipped:
        logger.debug(f"Skipped {skipped} malformed alias entries.")
    return alias_map


class AliasResolver:
    """Maps free-text Pokémon names to the identifier PokéAPI understands.

    The alias table is downloaded lazily, once per resolver. Callers that
    arrive while the download is in flight await the same task.
    """

    def __init__(self, client: BaseApiClient, alias_data_url: Optional[str] = None):
        self.client = client
        self.alias_data_url = alias_data_url or str(settings.alias_data_url)
        self._alias_task: Optional["asyncio.Task[AliasMap]"] = None

    async def get_alias_map(self) -> AliasMap:
        # No await between the check and the assignment, so only one task is ever created
        if self._alias_task is None:
            self._alias_task = asyncio.ensure_future(self._load_alias_map())
        return await asyncio.shield(self._alias_task)

    async def _load_alias_map(self) -> AliasMap:
        try:
            data = await self.client.get_json(self.alias_data_url)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            alias_map = build_alias_map(data)
        except Exception as e:
            logger.error(
                f"Could not load the Pokémon alias table from {self.alias_data_url}: {e}"
            )
            return {}

        logger.info(f"Loaded {len(alias_map)} Pokémon aliases.")
        return alias_map

    async def resolve(self, raw_name: str) -> str:
        """Returns the canonical id for ``raw_name``.

        Unknown names fall back to their slug, or to the raw name when the
        slug comes out empty.
        """
        alias_map = await self.get_alias_map()
        normalized = normalize_name(raw_name)

        if normalized in alias_map:
            return alias_map[normalized]

        return normalized if normalized else raw_name
