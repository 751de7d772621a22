import sys
import asyncio
import argparse
from typing import List, Optional

import httpx

from team_pokedex.logging.setup import setup_logging
from team_pokedex.config.settings import settings

setup_logging()

from loguru import logger

from team_pokedex.models.enums import RuntimeEnvironment
from team_pokedex.rendering.data_sources import select_data_source
from team_pokedex.rendering.renderer import write_page


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="render_page.py",
        description="Render the team cards page from a generated dataset.",
    )
    parser.add_argument("page", help="HTML file to write")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--sidecar", help="Local data.js sidecar (page opened from disk, no fetch)"
    )
    source.add_argument("--data-url", help="URL of the served data.json")
    source.add_argument(
        "--page-url", help="URL of the served page; data.json is fetched next to it"
    )
    parser.add_argument("--title", default=settings.page_title, help="Page title")
    return parser


async def render(
    args: argparse.Namespace, transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    if args.sidecar:
        source = select_data_source(
            RuntimeEnvironment.LOCAL_FILE, sidecar_path=args.sidecar
        )
    else:
        source = select_data_source(
            RuntimeEnvironment.HTTP,
            data_url=args.data_url,
            page_url=args.page_url,
            transport=transport,
        )

    # A missing or broken dataset still yields a (empty) page
    members = await source.load()
    write_page(members, args.page, args.title)


def main(
    argv: Optional[List[str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(render(args, transport))
    except OSError as e:
        logger.error(f"Could not write {args.page}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
