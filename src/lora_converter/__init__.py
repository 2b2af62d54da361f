"""Convert LoRA files and resolve their metadata from Civitai."""

from .config import settings
from .conversion import ConversionOutcome, ConversionRequest, LoRAImporter, ModelVersion, load_importer
from .credentials import CredentialResolver
from .descriptor import FinalDescriptor
from .exceptions import ConversionError, ImporterLoadError, LoRAConverterError
from .fingerprint import fingerprint_file
from .merger import CLIOverrides, ResolvedParameters, merge
from .orchestrator import ConversionOrchestrator
from .registry import LookupSuccess, MissingOrInvalidCredential, NetworkError, RegistryClient, RegistryRecord

__all__ = [
    "settings",
    "CLIOverrides",
    "ConversionOrchestrator",
    "ConversionOutcome",
    "ConversionRequest",
    "CredentialResolver",
    "FinalDescriptor",
    "LoRAImporter",
    "LookupSuccess",
    "MissingOrInvalidCredential",
    "ModelVersion",
    "NetworkError",
    "RegistryClient",
    "RegistryRecord",
    "ResolvedParameters",
    "fingerprint_file",
    "load_importer",
    "merge",
    "LoRAConverterError",
    "ConversionError",
    "ImporterLoadError",
]
