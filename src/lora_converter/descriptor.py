"""Final descriptor document emitted on stdout."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .conversion import ConversionOutcome, ModelVersion
from .merger import ResolvedParameters


class FinalDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    file: str
    version: ModelVersion
    has_text_embedding: bool = Field(serialization_alias="ti_embedding")
    text_embedding_length: int
    is_alternate_decomposition: bool = Field(serialization_alias="is_lo_ha")
    trigger_words: list[str] | None = None
    base_model_tag: str | None = Field(default=None, serialization_alias="base_model")

    @classmethod
    def assemble(cls, params: ResolvedParameters, outcome: ConversionOutcome, file_name: str) -> FinalDescriptor:
        return cls(
            name=params.name,
            file=file_name,
            version=outcome.version,
            has_text_embedding=outcome.has_text_embedding,
            text_embedding_length=outcome.text_embedding_length,
            is_alternate_decomposition=outcome.is_alternate_decomposition,
            trigger_words=list(params.trigger_words) if params.trigger_words is not None else None,
            base_model_tag=params.base_model_tag,
        )

    def to_document(self) -> dict[str, object]:
        """Snake-case document with absent optional fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
