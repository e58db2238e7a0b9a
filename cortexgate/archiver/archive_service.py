"""
Arquivamento de itens do inbox no second brain.

save:    localiza o item -> renderiza Markdown -> escolhe a pasta pela fonte
         -> grava o .md -> remove o JSON do inbox.
dismiss: localiza o item -> remove o JSON do inbox.

A gravação no arquivo de destino sempre termina antes da remoção do inbox.
Se a remoção falhar depois da gravação, o item fica duplicado (inbox e
arquivo); isso é registrado como erro e a falha sobe para o chamador.
"""
import os
import re
import logging
from datetime import date
from typing import Optional
from pydantic import BaseModel
from strif import atomic_output_file

from cortexgate.config.settings import get_settings
from cortexgate.renderer.markdown_renderer import render_markdown
from cortexgate.storage.models import Item
from cortexgate.storage.repository import delete_item_file, find_item
from cortexgate.utils.date_utils import resolve_date

logger = logging.getLogger(__name__)

CATEGORY_DIRS = {
    "newsletter": os.path.join("3-resources", "newsletters"),
    "youtube": os.path.join("3-resources", "videos"),
    "website": os.path.join("3-resources", "articles"),
    "research": os.path.join("3-resources", "research"),
}
FALLBACK_DIR = "inbox"

SLUG_MAX_LENGTH = 50
_TRANSLITERATION = {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"}
_TRANSLIT_RE = re.compile("[äöüß]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


class ItemNotFound(LookupError):
    def __init__(self, item_id: str):
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


class ArchiveResult(BaseModel):
    item_id: str
    saved_to: str
    category: str


def target_directory(source: str) -> str:
    """Pasta relativa do bucket; fontes desconhecidas vão para o fallback."""
    return CATEGORY_DIRS.get(source, FALLBACK_DIR)


def slugify(text: str) -> str:
    slug = _TRANSLIT_RE.sub(lambda m: _TRANSLITERATION[m.group(0)], text.lower())
    slug = _NON_ALNUM_RE.sub("-", slug).strip("-")
    return slug[:SLUG_MAX_LENGTH]


def archive_filename(item: Item, today: Optional[date] = None) -> str:
    slug = slugify(item.title) or "untitled"
    return f"{resolve_date(item.created_at, today)}-{slug}.md"


def display_path(path: str) -> str:
    """Substitui o diretório home por ~ (exibição no frontend)."""
    home = os.path.expanduser("~")
    if path == home or path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path


def write_markdown(path: str, markdown: str) -> None:
    if os.path.exists(path):
        logger.warning("Overwriting existing archive file: %s", path)
    with atomic_output_file(path, make_parents=True) as tmp_path:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(markdown)


def archive_item(
    item_id: str,
    inbox_dir: Optional[str] = None,
    archive_root: Optional[str] = None,
    today: Optional[date] = None,
) -> ArchiveResult:
    archive_root = archive_root or get_settings().second_brain_dir

    found = find_item(item_id, inbox_dir)
    if found is None:
        raise ItemNotFound(item_id)
    item_path, item = found

    markdown = render_markdown(item, today)

    category = target_directory(item.source)
    target_dir = os.path.join(archive_root, category)
    os.makedirs(target_dir, exist_ok=True)

    full_path = os.path.join(target_dir, archive_filename(item, today))
    write_markdown(full_path, markdown)
    logger.info("Saved to: %s", full_path)

    try:
        delete_item_file(item_path)
    except OSError:
        logger.error(
            "Item %s saved to %s but could not be removed from inbox (%s); "
            "it is now present in both places",
            item_id, full_path, item_path,
        )
        raise
    logger.info("Deleted: %s", item_path)

    return ArchiveResult(item_id=item_id, saved_to=full_path, category=category)


def discard_item(item_id: str, inbox_dir: Optional[str] = None) -> str:
    """Remove o item do inbox sem arquivar. Retorna o caminho removido."""
    found = find_item(item_id, inbox_dir)
    if found is None:
        raise ItemNotFound(item_id)
    item_path, _ = found

    delete_item_file(item_path)
    logger.info("Dismissed: %s", item_path)
    return item_path
