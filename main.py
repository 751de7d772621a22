import sys
import asyncio
import argparse
from typing import List, Optional

import httpx

# --- Settings/Logging ---
from team_pokedex.logging.setup import setup_logging

setup_logging()

from loguru import logger

from team_pokedex.assembly.assembler import (
    DatasetAssembler,
    serialize_dataset,
    sidecar_collides,
    write_dataset,
)
from team_pokedex.clients.pokeapi_client import PokeApiClient
from team_pokedex.models.enums import RuntimeEnvironment
from team_pokedex.parsing.csv_parser import CsvParseError, read_rows
from team_pokedex.rendering.data_sources import select_data_source
from team_pokedex.rendering.renderer import write_page
from team_pokedex.resolution.alias_resolver import AliasResolver

from rich.console import Console
from rich.panel import Panel

stderr_console = Console(stderr=True)


class _ArgumentParser(argparse.ArgumentParser):
    """argparse, but usage errors exit with status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="main.py",
        description="Enrich a person,pokemon CSV with PokéAPI artwork and flavor text.",
    )
    parser.add_argument("input", help="CSV file with one person,pokemon pair per line")
    parser.add_argument(
        "output",
        nargs="?",
        help="data.json destination (a .js sidecar is written next to it). "
        "Without it the JSON goes to stdout.",
    )
    parser.add_argument("--page", help="Also render the static cards page to this path")
    return parser


async def generate(
    input_path: str,
    output_path: Optional[str] = None,
    page_path: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """Runs the whole build and returns the process exit code."""
    try:
        rows = read_rows(input_path)
    except CsvParseError as e:
        logger.error(str(e))
        return 1

    if not rows:
        logger.error("No data found in CSV.")
        return 1

    if output_path and sidecar_collides(output_path):
        logger.error(f"Output {output_path} would be overwritten by its .js sidecar.")
        return 1

    async with PokeApiClient(transport=transport) as client:
        resolver = AliasResolver(client)
        records = await DatasetAssembler(client, resolver).assemble(rows)

    if output_path:
        json_path, sidecar_path = write_dataset(records, output_path)
        stderr_console.print(
            Panel(
                f"{len(records)}/{len(rows)} team member(s)\n"
                f"JSON:    {json_path}\nSidecar: {sidecar_path}",
                title="Team data generated",
            )
        )
    else:
        sys.stdout.write(serialize_dataset(records))
        sys.stdout.flush()

    if page_path:
        source = select_data_source(RuntimeEnvironment.LOCAL_FILE, records=records)
        write_page(await source.load(), page_path)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(generate(args.input, args.output, args.page))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        return 1
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
