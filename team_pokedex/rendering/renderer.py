from pathlib import Path
from typing import Optional, Sequence, Union

from jinja2 import Environment, select_autoescape
from loguru import logger
from markupsafe import Markup

from team_pokedex.config.settings import settings
from team_pokedex.models.team import TeamRecord

CARDS_TEMPLATE = """\
{%- for member in members %}
<article class="card">
  <img src="{{ member.image or '' }}" alt="{{ member.pokemon }} de {{ member.name }}" loading="lazy">
  <div class="card-content">
    <h2>{{ member.name }}</h2>
    <span class="badge">{{ member.pokemon }}</span>
    <p class="description">{{ member.description }}</p>
  </div>
</article>
{%- endfor %}
"""

PAGE_TEMPLATE = """\
<!doctype html>
<html lang="fr">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title }}</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 0; padding: 2rem; background: #f4f4f8; }
    h1 { text-align: center; }
    #cards { display: grid; grid-template-columns: repeat(auto-fill, minmax(240px, 1fr)); gap: 1.5rem; }
    .card { background: #fff; border-radius: 12px; overflow: hidden; box-shadow: 0 2px 8px rgba(0, 0, 0, .08); }
    .card img { width: 100%; aspect-ratio: 1; object-fit: contain; background: #fafafa; }
    .card-content { padding: 1rem; }
    .badge { display: inline-block; padding: .2rem .6rem; border-radius: 999px; background: #ffcb05; font-weight: 600; }
    .description { color: #444; line-height: 1.4; }
  </style>
</head>
<body>
  <h1>{{ title }}</h1>
  <section id="cards">
{{ cards }}
  </section>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
_cards_template = _env.from_string(CARDS_TEMPLATE)
_page_template = _env.from_string(PAGE_TEMPLATE)


def render_cards(members: Sequence[TeamRecord]) -> str:
    """One ``<article class="card">`` per team member, in dataset order."""
    return _cards_template.render(members=members)


def render_page(members: Sequence[TeamRecord], title: Optional[str] = None) -> str:
    # Cards are already escaped
    return _page_template.render(
        title=title or settings.page_title, cards=Markup(render_cards(members))
    )


def write_page(
    members: Sequence[TeamRecord],
    output_path: Union[str, Path],
    title: Optional[str] = None,
) -> Path:
    page_path = Path(output_path).resolve()
    page_path.write_text(render_page(members, title), encoding="utf-8")
    logger.success(f"Rendered {len(members)} card(s) to {page_path}")
    return page_path
