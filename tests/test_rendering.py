import httpx
import pytest

from conftest import StubApi, respond
from team_pokedex.models.enums import RuntimeEnvironment
from team_pokedex.models.team import TeamRecord
from team_pokedex.rendering.data_sources import (
    EmbeddedDataSource,
    HttpDataSource,
    parse_sidecar,
    select_data_source,
    DataSourceError,
    validate_records,
)
from team_pokedex.rendering.renderer import render_cards, render_page, write_page

PAGE_URL = "https://team.example/pokedex/index.html"
DATA_URL = "https://team.example/pokedex/data.json"

MEMBERS = [
    {"name": "Ash", "pokemon": "Pikachu", "image": "https://img/25.png", "description": "Électrique"},
    {"name": "Misty", "pokemon": "Starmie", "image": None, "description": ""},
]


def test_render_empty_dataset():
    assert render_cards([]).count("<article") == 0
    page = render_page([], title="Équipe")
    assert '<section id="cards">' in page
    assert "<article" not in page


def test_render_cards():
    members = [TeamRecord(**m) for m in MEMBERS]
    html = render_cards(members)

    assert html.count('<article class="card">') == 2
    assert html.index("Ash") < html.index("Misty")
    assert 'alt="Pikachu de Ash"' in html
    assert 'src="https://img/25.png"' in html
    assert 'loading="lazy"' in html
    assert '<span class="badge">Starmie</span>' in html
    assert '<p class="description">Électrique</p>' in html


def test_render_escapes_text():
    member = TeamRecord(name="<script>x</script>", pokemon="Mr Mime", description="a & b")
    html = render_page([member])
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html
    assert "a &amp; b" in html


def test_write_page(tmp_path):
    path = write_page([TeamRecord(**MEMBERS[0])], tmp_path / "index.html", "Team")
    content = path.read_text(encoding="utf-8")
    assert "<title>Team</title>" in content
    assert content.count("<article") == 1


def test_parse_sidecar():
    assert parse_sidecar('window.__TEAM_DATA__ = [{"a": 1}];\n') == [{"a": 1}]
    with pytest.raises(DataSourceError):
        parse_sidecar("var x = [];")
    with pytest.raises(DataSourceError):
        parse_sidecar("window.x = [oops];")


async def test_embedded_source_from_records():
    records = await EmbeddedDataSource(records=MEMBERS).load()
    assert [r.name for r in records] == ["Ash", "Misty"]


async def test_embedded_source_from_sidecar(tmp_path):
    sidecar = tmp_path / "data.js"
    sidecar.write_text(
        'window.__TEAM_DATA__ = [{"name": "Ash", "pokemon": "Pikachu", "image": null, "description": ""}];\n',
        encoding="utf-8",
    )
    records = await EmbeddedDataSource(sidecar_path=sidecar).load()
    assert records == [TeamRecord(name="Ash", pokemon="Pikachu")]


@pytest.mark.parametrize(
    "source",
    [
        EmbeddedDataSource(),
        EmbeddedDataSource(records=[{"pokemon": "Pikachu"}]),
        EmbeddedDataSource(
            records=[{"name": "Ash", "pokemon": "Pikachu", "image": None, "description": ["x"]}]
        ),
        EmbeddedDataSource(sidecar_path="/nonexistent/data.js"),
    ],
)
async def test_embedded_source_falls_back_to_empty(source):
    assert await source.load() == []


async def test_http_source_fetches_sibling_data_json():
    stub = StubApi({DATA_URL: MEMBERS})
    records = await HttpDataSource.next_to_page(PAGE_URL, transport=stub.transport).load()

    assert [r.pokemon for r in records] == ["Pikachu", "Starmie"]
    assert stub.calls == [DATA_URL]


async def test_http_source_bypasses_cache():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, json=[])

    await HttpDataSource(DATA_URL, transport=httpx.MockTransport(handler)).load()
    assert seen["cache-control"] == "no-store"


@pytest.mark.parametrize(
    "route",
    [
        respond(500),
        respond(404),
        respond(200, json={"members": MEMBERS}),
        respond(200, text="not json"),
        respond(200, json=[{"name": "Ash"}]),
        respond(
            200,
            json=[{"name": "Ash", "pokemon": "Pikachu", "image": None, "description": 5}],
        ),
    ],
)
async def test_http_source_falls_back_to_empty(route):
    stub = StubApi({DATA_URL: route})
    assert await HttpDataSource(DATA_URL, transport=stub.transport).load() == []


async def test_http_source_network_error():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    source = HttpDataSource(DATA_URL, transport=httpx.MockTransport(boom))
    assert await source.load() == []


def test_select_data_source():
    embedded = select_data_source(RuntimeEnvironment.LOCAL_FILE, records=[])
    assert isinstance(embedded, EmbeddedDataSource)

    sibling = select_data_source(RuntimeEnvironment.HTTP, page_url=PAGE_URL)
    assert isinstance(sibling, HttpDataSource)
    assert sibling.url == DATA_URL

    direct = select_data_source(
        RuntimeEnvironment.HTTP, data_url="https://cdn.example/team.json", page_url=PAGE_URL
    )
    assert direct.url == "https://cdn.example/team.json"

    with pytest.raises(ValueError):
        select_data_source(RuntimeEnvironment.HTTP)


@pytest.mark.parametrize("description", [5, ["x"], True, {"fr": "texte"}])
def test_validate_records_rejects_non_string_description(description):
    payload = [{"name": "Ash", "pokemon": "Pikachu", "image": None, "description": description}]
    with pytest.raises(DataSourceError):
        validate_records(payload)


def test_null_description_becomes_empty():
    assert validate_records([{"name": "Ash", "pokemon": "Pikachu", "description": None}]) == [
        TeamRecord(name="Ash", pokemon="Pikachu")
    ]
