from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

POKEAPI = "https://pokeapi.co/api/v2"
ALIAS_URL = "https://raw.githubusercontent.com/fanzeyi/pokemon.json/master/pokedex.json"

ALIAS_DATASET = [
    {"id": 25, "name": {"english": "Pikachu", "french": "Pikachu"}},
    {"id": 121, "name": {"english": "Starmie", "french": "Stari"}},
    {"id": 122, "name": {"english": "Mr. Mime", "french": "M. Mime"}},
    {"id": 133, "name": {"english": "Eevee", "french": "Évoli"}},
]


def pokemon_payload(artwork=None, sprite=None) -> Dict[str, Any]:
    return {
        "sprites": {
            "front_default": sprite,
            "other": {"official-artwork": {"front_default": artwork}},
        }
    }


def species_payload(*entries: Tuple[str, str]) -> Dict[str, Any]:
    return {
        "flavor_text_entries": [
            {"flavor_text": text, "language": {"name": language}}
            for language, text in entries
        ]
    }


def artwork_url(pokemon_id: int) -> str:
    return f"https://img.example/official-artwork/{pokemon_id}.png"


DEFAULT_ROUTES: Dict[str, Any] = {
    ALIAS_URL: ALIAS_DATASET,
    f"{POKEAPI}/pokemon/25": pokemon_payload(artwork=artwork_url(25)),
    f"{POKEAPI}/pokemon-species/25": species_payload(
        ("en", "When several of\nthese POKéMON gather,"),
        ("fr", "Il lui arrive de\fremettre d'aplomb\nun Pikachu allié."),
    ),
    f"{POKEAPI}/pokemon/121": pokemon_payload(artwork=artwork_url(121)),
    f"{POKEAPI}/pokemon-species/121": species_payload(
        ("en", "Its central core glows\nwith the seven colors."),
    ),
}


class StubApi:
    """Routes requests by full URL to canned JSON bodies or status codes."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = dict(routes)
        self.calls: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def count(self, url: str) -> int:
        return self.calls.count(url)


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi(DEFAULT_ROUTES)


def respond(code: int, **kwargs) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _request: httpx.Response(code, **kwargs)
