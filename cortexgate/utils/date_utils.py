from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Converte string ISO 8601 ou RFC 2822 para datetime; None se ausente ou inválida."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    # formato de e-mail/RSS: "Tue, 05 Mar 2024 10:00:00 GMT"
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def resolve_date(value: Optional[str], today: Optional[date] = None) -> str:
    """
    Data no formato YYYY-MM-DD. Timestamps com fuso são normalizados para UTC;
    valores ausentes ou inválidos caem na data atual.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return (today or datetime.now(timezone.utc).date()).isoformat()
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date().isoformat()
