from dotenv import load_dotenv
from pydantic import BaseModel, Field
from typing import Optional
import os

# Carrega variáveis do .env (não sobrescreve o ambiente)
load_dotenv()

HOME_DIR = os.path.expanduser("~")
WEB_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "web")


def _to_int(v: Optional[str], default: int) -> int:
    if v is None or not v.strip():
        return default
    return int(v.strip())


def _to_path(v: Optional[str], default: str) -> str:
    if v is None or not v.strip():
        return default
    return os.path.abspath(os.path.expanduser(v.strip()))


class Settings(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    inbox_dir: str = Field(default=os.path.join(HOME_DIR, "dashboard-inbox"))
    second_brain_dir: str = Field(default=os.path.join(HOME_DIR, "second-brain"))
    static_dir: str = Field(default=WEB_DIR)

    log_level: str = Field(default="INFO")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is not None:
        return _settings

    _settings = Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_to_int(os.getenv("PORT"), 8080),
        inbox_dir=_to_path(os.getenv("INBOX_DIR"), os.path.join(HOME_DIR, "dashboard-inbox")),
        second_brain_dir=_to_path(os.getenv("SECOND_BRAIN_DIR"), os.path.join(HOME_DIR, "second-brain")),
        static_dir=_to_path(os.getenv("STATIC_DIR"), WEB_DIR),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    return _settings


def reset_settings() -> None:
    """Descarta o cache (usado nos testes após alterar o ambiente)."""
    global _settings
    _settings = None
