import os
import logging
from typing import List, Optional, Tuple
from pydantic import ValidationError

from cortexgate.config.settings import get_settings
from cortexgate.storage.models import Item
from cortexgate.storage.sanitizer import load_json_file

logger = logging.getLogger(__name__)

ITEM_SUFFIX = ".json"


def _inbox(inbox_dir: Optional[str]) -> str:
    return inbox_dir or get_settings().inbox_dir


def item_files(inbox_dir: str) -> List[str]:
    """Arquivos de item do inbox, em ordem de nome (ordem de enumeração)."""
    names = sorted(f for f in os.listdir(inbox_dir) if f.endswith(ITEM_SUFFIX))
    return [os.path.join(inbox_dir, name) for name in names]


def load_item(path: str) -> Optional[Item]:
    """
    Lê e valida um item. Qualquer falha (leitura, JSON ilegível, schema
    inválido) é registrada e retorna None; nunca interrompe a varredura.
    """
    name = os.path.basename(path)
    try:
        data = load_json_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Error reading %s: %s", name, e)
        return None
    if data is None:
        logger.warning("Error reading %s: Invalid JSON (even after sanitization)", name)
        return None
    try:
        return Item.model_validate(data)
    except ValidationError as e:
        logger.warning("Error reading %s: not a valid item (%d errors)", name, e.error_count())
        return None


def list_items(inbox_dir: Optional[str] = None) -> List[Item]:
    inbox_dir = _inbox(inbox_dir)
    os.makedirs(inbox_dir, exist_ok=True)

    items = []
    for path in item_files(inbox_dir):
        item = load_item(path)
        if item is not None:
            items.append(item)
    return items


def find_item(item_id: str, inbox_dir: Optional[str] = None) -> Optional[Tuple[str, Item]]:
    """
    Busca linear por id. Com ids duplicados vence o primeiro arquivo na ordem
    de enumeração, e um aviso lista todos os arquivos envolvidos.
    """
    inbox_dir = _inbox(inbox_dir)
    if not os.path.isdir(inbox_dir):
        return None

    matches: List[Tuple[str, Item]] = []
    for path in item_files(inbox_dir):
        item = load_item(path)
        if item is not None and item.id == item_id:
            matches.append((path, item))

    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "Duplicate id %r in %d files (%s); using %s",
            item_id,
            len(matches),
            ", ".join(os.path.basename(p) for p, _ in matches),
            os.path.basename(matches[0][0]),
        )
    return matches[0]


def delete_item_file(path: str) -> None:
    # FileNotFoundError / PermissionError sobem para o chamador
    os.remove(path)
