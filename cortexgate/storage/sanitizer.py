"""
Leitura tolerante de JSON gerado por IA.

Os produtores dos itens costumam emitir aspas tipográficas ("smart quotes") e
travessões que quebram o JSON estrito. O parse tenta primeiro o texto original;
se falhar, substitui esses caracteres por ASCII e tenta de novo.

O reparo em disco (`repair_json_file`) é um passo separado e explícito, chamado
por `load_json_file` apenas quando a sanitização foi necessária.
"""
import json
import logging
import os
import re
from typing import Any, NamedTuple, Optional

logger = logging.getLogger(__name__)

_DOUBLE_QUOTES_RE = re.compile("[\u201C\u201D\u201E\u201F\u2033\u2036]")
_SINGLE_QUOTES_RE = re.compile("[\u2018\u2019\u201A\u201B\u2032\u2035]")
_DASHES_RE = re.compile("[\u2013\u2014]")


class ParsedJson(NamedTuple):
    data: Any
    text: str       # texto efetivamente parseado
    repaired: bool  # True se a sanitização alterou o texto


def sanitize_json_text(text: str) -> str:
    text = _DOUBLE_QUOTES_RE.sub('"', text)
    text = _SINGLE_QUOTES_RE.sub("'", text)
    return _DASHES_RE.sub("-", text)


def parse_json_text(text: str) -> Optional[ParsedJson]:
    """Retorna None quando o texto é ilegível mesmo após a sanitização."""
    try:
        return ParsedJson(json.loads(text), text, False)
    except json.JSONDecodeError:
        pass

    sanitized = sanitize_json_text(text)
    try:
        data = json.loads(sanitized)
    except json.JSONDecodeError:
        return None
    return ParsedJson(data, sanitized, sanitized != text)


def repair_json_file(path: str, sanitized: str) -> bool:
    """Regrava o arquivo com o texto sanitizado. Falhas são só registradas."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(sanitized)
    except OSError as e:
        logger.error("Could not auto-fix %s: %s", path, e)
        return False
    logger.info("Auto-fixed JSON: %s", os.path.basename(path))
    return True


def load_json_file(path: str) -> Optional[Any]:
    # Erros de leitura (OSError, UnicodeDecodeError) sobem para o chamador
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    parsed = parse_json_text(text)
    if parsed is None:
        return None
    if parsed.repaired:
        repair_json_file(path, parsed.text)
    return parsed.data
