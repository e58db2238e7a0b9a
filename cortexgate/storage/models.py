from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


def _drop_nulls(value):
    # null na lista inteira ou em entradas isoladas (comum em saída de IA)
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v is not None]
    return value


class ItemMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    url: Optional[str] = None
    video_url: Optional[str] = None
    duration: Optional[str] = None  # ex.: "12:34"


class Section(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    heading: str = ""
    items: List[str] = []

    @field_validator("heading", mode="before")
    @classmethod
    def _heading_none(cls, v):
        return "" if v is None else v

    @field_validator("items", mode="before")
    @classmethod
    def _items_nulls(cls, v):
        return _drop_nulls(v)


class Item(BaseModel):
    # campos extras do produtor são preservados; só `id` é obrigatório
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    source: str = ""  # newsletter, youtube, website, research (ou desconhecido)
    title: str = ""
    summary: Optional[str] = None
    created_at: Optional[str] = None
    content: Optional[str] = None  # formato legado
    sections: List[Section] = []
    links: List[str] = []
    metadata: Optional[ItemMetadata] = None

    @field_validator("source", "title", mode="before")
    @classmethod
    def _text_none(cls, v):
        return "" if v is None else v

    @field_validator("sections", "links", mode="before")
    @classmethod
    def _list_nulls(cls, v):
        return _drop_nulls(v)

    def as_written(self) -> dict:
        """Dump sem os defaults que o arquivo não trazia (extras preservados)."""
        unset = set(type(self).model_fields) - self.model_fields_set
        return self.model_dump(exclude=unset, exclude_none=True)
