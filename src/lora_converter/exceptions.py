"""Custom exceptions for lora-converter."""


class LoRAConverterError(Exception):
    """Base exception for lora-converter errors."""

    pass


class ConversionError(LoRAConverterError):
    """Raised by importers when the artifact cannot be converted."""

    pass


class ImporterLoadError(LoRAConverterError):
    """Raised when the configured importer cannot be loaded."""

    pass
