"""Conversion pipeline: fingerprint, credential, registry lookup, merge, import.

Registry enrichment is best-effort. Credential and lookup problems are logged
as warnings and the run continues with whatever metadata is available.
Fingerprinting and conversion failures abort the run; no partial descriptor is
ever produced.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .conversion import ConversionRequest, LoRAImporter, output_file_name
from .credentials import CredentialResolver
from .descriptor import FinalDescriptor
from .fingerprint import fingerprint_file
from .merger import DEFAULT_SCALE_FACTOR, CLIOverrides, merge
from .observability import bind_run_context, clear_run_context, get_run_logger
from .registry import LookupSuccess, MissingOrInvalidCredential, NetworkError, RegistryClient, RegistryRecord

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_WARNING = (
    "No CIVITAI_API_KEY found in environment, ~/.env, or keyring. "
    "API call will proceed unauthenticated (may be rate-limited or restricted)."
)
REJECTED_CREDENTIAL_WARNING = (
    "Civitai API key is required but was not found or is invalid. "
    "Set CIVITAI_API_KEY in your environment, ~/.env file, or keyring."
)


class ConversionOrchestrator:
    """Runs one conversion and assembles its descriptor."""

    def __init__(
        self,
        importer: LoRAImporter,
        *,
        registry: RegistryClient | None = None,
        credentials: CredentialResolver | None = None,
        default_scale: float = DEFAULT_SCALE_FACTOR,
    ) -> None:
        self._importer = importer
        self._registry = registry or RegistryClient()
        self._credentials = credentials or CredentialResolver()
        self._default_scale = default_scale

    async def fetch_record(self, fingerprint: str) -> RegistryRecord | None:
        """Resolve the credential and query the registry, reducing failures to None."""
        credential = self._credentials.resolve()
        if credential is None:
            logger.warning(MISSING_CREDENTIAL_WARNING)

        result = await self._registry.lookup(fingerprint, credential)
        match result:
            case LookupSuccess(record=record):
                return record
            case MissingOrInvalidCredential():
                logger.warning(REJECTED_CREDENTIAL_WARNING)
            case NetworkError(message=message):
                logger.warning(f"Could not fetch Civitai metadata: {message}")
        return None

    async def run(self, overrides: CLIOverrides, file_path: str | Path, output_directory: str | Path) -> FinalDescriptor:
        """Convert ``file_path`` and return its descriptor.

        Raises:
            OSError: If the artifact cannot be read. Raised before any network call.
            Exception: Whatever the importer raises, unchanged.
        """
        source_path = Path(file_path)
        run_log = get_run_logger()
        bind_run_context(str(source_path))
        try:
            fingerprint = fingerprint_file(source_path)
            run_log.debug("fingerprint_computed", fingerprint=fingerprint)

            record = await self.fetch_record(fingerprint)
            run_log.info("registry_lookup_finished", enriched=record is not None)

            params = merge(overrides, record, self._default_scale)
            file_name = output_file_name(params.name)
            request = ConversionRequest(
                source_path=source_path,
                name=params.name,
                output_file_name=file_name,
                output_directory=Path(output_directory),
                scale_factor=params.scale_factor,
                forced_version=params.forced_version,
            )
            run_log.info("conversion_started", name=params.name, file=file_name, scale_factor=params.scale_factor)
            outcome = self._importer.import_lora(request)
            run_log.info("conversion_finished", version=outcome.version.value)

            return FinalDescriptor.assemble(params, outcome, file_name)
        finally:
            clear_run_context()
