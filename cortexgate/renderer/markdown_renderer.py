from datetime import date
from typing import Dict, List, Optional, Union

from cortexgate.storage.models import Item
from cortexgate.utils.date_utils import resolve_date

FRONTMATTER_TAG = "cortexgate"
METADATA_KEYS = ("url", "video_url", "duration")


def build_frontmatter(item: Item, date_str: str) -> Dict[str, Union[str, List[str]]]:
    fm: Dict[str, Union[str, List[str]]] = {
        "type": f"{item.source}-summary",
        "date": date_str,
        "source": item.source,
        "tags": [item.source, "summary", FRONTMATTER_TAG],
    }
    if item.metadata:
        for key in METADATA_KEYS:
            value = getattr(item.metadata, key)
            if value:
                fm[key] = value
    return fm


def render_frontmatter(fm: Dict[str, Union[str, List[str]]]) -> str:
    lines = ["---"]
    for key, value in fm.items():
        if isinstance(value, list):
            lines.append(f"{key}:")
            lines.extend(f"  - {v}" for v in value)
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n\n"


def render_body(item: Item) -> str:
    # sections (formato novo) tem precedência sobre content (legado)
    md = ""
    if item.sections:
        for section in item.sections:
            md += f"## {section.heading}\n\n"
            for text in section.items:
                md += f"- {text}\n"
            md += "\n"
    elif item.content:
        md += f"## Details\n\n{item.content}\n\n"

    if item.links:
        md += "## Links\n\n"
        for link in item.links:
            md += f"- {link}\n"
    return md


def render_markdown(item: Item, today: Optional[date] = None) -> str:
    """
    Converte um item em Markdown com front-matter YAML.

    Determinístico para um mesmo item; `today` só é usado quando `created_at`
    está ausente ou inválido.
    """
    date_str = resolve_date(item.created_at, today)
    md = render_frontmatter(build_frontmatter(item, date_str))
    md += f"# {item.title}\n\n"
    md += f"> [!tldr] TL;DR\n> {item.summary or ''}\n\n"
    md += render_body(item)
    return md
