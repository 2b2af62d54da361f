"""Merge CLI overrides, registry metadata and defaults into conversion parameters.

Precedence per field, highest first:

- name: CLI override > registry display name > "unknown"
- base_model_tag, trigger_words: registry only
- scale_factor: CLI override > default (1.0)
- forced_version: CLI override only; otherwise the importer infers it
"""

from __future__ import annotations

from dataclasses import dataclass

from .conversion import ModelVersion
from .registry import RegistryRecord

UNKNOWN_NAME = "unknown"
DEFAULT_SCALE_FACTOR = 1.0


@dataclass(frozen=True, slots=True)
class CLIOverrides:
    name: str | None = None
    version: ModelVersion | None = None
    scale_factor: float | None = None


@dataclass(frozen=True, slots=True)
class ResolvedParameters:
    name: str
    scale_factor: float
    base_model_tag: str | None = None
    trigger_words: tuple[str, ...] | None = None
    forced_version: ModelVersion | None = None


def _present(value: str | None) -> str | None:
    # Blank strings never win precedence, so the resolved name is never empty.
    if value is None or not value.strip():
        return None
    return value


def merge(
    overrides: CLIOverrides,
    record: RegistryRecord | None,
    default_scale: float = DEFAULT_SCALE_FACTOR,
) -> ResolvedParameters:
    registry_name = record.display_name if record is not None else None
    name = _present(overrides.name) or _present(registry_name) or UNKNOWN_NAME

    return ResolvedParameters(
        name=name,
        scale_factor=overrides.scale_factor if overrides.scale_factor is not None else default_scale,
        base_model_tag=record.base_model_tag if record is not None else None,
        trigger_words=record.trigger_words if record is not None else None,
        forced_version=overrides.version,
    )
