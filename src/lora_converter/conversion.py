"""Conversion importer capability and the types crossing its boundary.

The actual file-format conversion lives outside this package. Anything with an
``import_lora(request) -> ConversionOutcome`` method can be plugged in, either
directly or through a ``"module:attribute"`` reference resolved by
``load_importer``.
"""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from .exceptions import ImporterLoadError

OUTPUT_FILE_SUFFIX = "_lora_f16.ckpt"
FALLBACK_FILE_STEM = "unknown"

_NON_ALNUM = re.compile(r"[\W_]+")


class ModelVersion(str, Enum):
    """Target runtime model version tags."""

    V1 = "v1"
    V2 = "v2"
    SDXL_BASE = "sdxl_base_v0.9"
    SDXL_REFINER = "sdxl_refiner_v0.9"
    SSD_1B = "ssd_1b"
    SVD_I2V = "svd_i2v"
    WURSTCHEN_STAGE_C = "wurstchen_v3.0_stage_c"
    SD3 = "sd3"
    SD3_LARGE = "sd3_large"
    PIXART = "pixart"
    AURAFLOW = "auraflow"
    FLUX1 = "flux1"
    HUNYUAN_VIDEO = "hunyuan_video"
    WAN_21_1_3B = "wan_v2.1_1.3b"
    WAN_21_14B = "wan_v2.1_14b"
    HIDREAM_I1 = "hidream_i1"
    QWEN_IMAGE = "qwen_image"
    WAN_22_5B = "wan_v2.2_5b"


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    source_path: Path
    name: str
    output_file_name: str
    output_directory: Path
    scale_factor: float
    forced_version: ModelVersion | None = None


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """Structural facts reported by the importer, copied verbatim into the descriptor."""

    version: ModelVersion
    has_text_embedding: bool
    text_embedding_length: int
    is_alternate_decomposition: bool


@runtime_checkable
class LoRAImporter(Protocol):
    """Converts a LoRA file into the target runtime format."""

    def import_lora(self, request: ConversionRequest) -> ConversionOutcome:
        """Convert ``request.source_path`` and write ``request.output_file_name``.

        When ``request.forced_version`` is None the version is inferred from
        the file content.

        Raises:
            ConversionError: If the file format is unrecognized, corrupt or unsupported.
        """
        ...


def cleanup_file_stem(name: str) -> str:
    """Normalize a display name into a lowercase, underscore-separated file stem."""
    stem = "_".join(part for part in _NON_ALNUM.split(name.lower()) if part)
    return stem or FALLBACK_FILE_STEM


def output_file_name(name: str) -> str:
    return cleanup_file_stem(name) + OUTPUT_FILE_SUFFIX


def load_importer(target: str) -> LoRAImporter:
    """Resolve a ``"module:attribute"`` reference to an importer instance.

    The attribute may be an importer instance or a zero-argument factory
    (usually a class) returning one.

    Raises:
        ImporterLoadError: If the reference is malformed, cannot be imported,
            or does not provide ``import_lora``.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ImporterLoadError(f"Importer reference must look like 'package.module:attribute', got {target!r}")

    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as e:
        raise ImporterLoadError(f"Cannot import importer module '{module_name}': {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ImporterLoadError(f"Importer '{target}' not found: {e}") from e

    if isinstance(obj, type) or (callable(obj) and not isinstance(obj, LoRAImporter)):
        try:
            obj = obj()
        except Exception as e:
            raise ImporterLoadError(f"Failed to initialize importer '{target}': {e}") from e

    if not isinstance(obj, LoRAImporter):
        raise ImporterLoadError(f"Importer '{target}' does not provide import_lora()")
    return obj
