import json
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from loguru import logger

from team_pokedex.clients.base_client import ApiClientError, NotFoundError
from team_pokedex.clients.pokeapi_client import PokeApiClient
from team_pokedex.config.settings import settings
from team_pokedex.models.team import Row, TeamRecord
from team_pokedex.resolution.alias_resolver import AliasResolver
from team_pokedex.utils.text_utils import capitalize_name

SIDECAR_SUFFIX = ".js"


class DatasetAssembler:
    """Turns parsed rows into TeamRecords, one row at a time."""

    def __init__(self, client: PokeApiClient, resolver: AliasResolver):
        self.client = client
        self.resolver = resolver

    async def build_record(self, row: Row) -> TeamRecord:
        """Resolve, fetch and compose the record for a single row."""
        identifier = await self.resolver.resolve(row.species_raw_name)
        logger.debug(f"{row.species_raw_name!r} resolved to {identifier!r}")

        metadata = await self.client.fetch_metadata(identifier)
        return TeamRecord(
            name=row.person,
            pokemon=capitalize_name(row.species_raw_name),
            image=metadata.image,
            description=metadata.description,
        )

    async def assemble(self, rows: Sequence[Row]) -> List[TeamRecord]:
        """Builds the dataset in input order, skipping rows that fail.

        Rows are handled strictly one after the other.
        """
        records: List[TeamRecord] = []
        for row in rows:
            try:
                records.append(await self.build_record(row))
            except NotFoundError as e:
                logger.error(f"Unknown Pokémon {row.species_raw_name}: {e}")
            except ApiClientError as e:
                logger.error(f"Failed to fetch data for {row.species_raw_name}: {e}")
            except Exception as e:
                logger.exception(
                    f"Unexpected error while processing {row.species_raw_name}: {e}"
                )

        skipped = len(rows) - len(records)
        if skipped:
            logger.warning(f"Skipped {skipped} of {len(rows)} row(s).")
        logger.info(f"Assembled {len(records)} team record(s).")
        return records


def serialize_dataset(records: Sequence[TeamRecord]) -> str:
    """JSON text with 2-space indentation, non-ASCII characters kept as is."""
    return json.dumps(
        [record.model_dump(mode="json") for record in records],
        indent=2,
        ensure_ascii=False,
    )


def build_sidecar(json_text: str, global_name: Optional[str] = None) -> str:
    """Wraps the JSON payload in a global assignment for pages opened from disk."""
    return f"window.{global_name or settings.sidecar_global_name} = {json_text};\n"


def build_sidecar_path(output_path: Union[str, Path]) -> Path:
    return Path(output_path).with_suffix(SIDECAR_SUFFIX)


def sidecar_collides(output_path: Union[str, Path]) -> bool:
    """True when the sidecar for ``output_path`` would overwrite the JSON itself."""
    json_path = Path(output_path).resolve()
    return build_sidecar_path(json_path) == json_path


def write_dataset(
    records: Sequence[TeamRecord], output_path: Union[str, Path]
) -> Tuple[Path, Path]:
    """Writes data.json and its JS sidecar next to it.

    Returns:
        The resolved JSON path and sidecar path.
    """
    json_path = Path(output_path).resolve()
    sidecar_path = build_sidecar_path(json_path)
    if sidecar_collides(json_path):
        raise ValueError(f"Output {json_path} would be overwritten by its own sidecar")

    json_text = serialize_dataset(records)

    json_path.write_text(json_text, encoding="utf-8")
    logger.success(f"Data written to {json_path}")

    sidecar_path.write_text(build_sidecar(json_text), encoding="utf-8")
    logger.success(f"Fallback JS data written to {sidecar_path}")

    return json_path, sidecar_path
