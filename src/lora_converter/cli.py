"""CLI interface for lora-converter."""

import asyncio
from typing import Optional

import typer

from .config import settings
from .conversion import ModelVersion, load_importer
from .credentials import CredentialResolver
from .exceptions import ImporterLoadError, LoRAConverterError
from .merger import CLIOverrides
from .observability import setup_structured_logging
from .orchestrator import ConversionOrchestrator
from .registry import RegistryClient

app = typer.Typer(help="Convert LoRA files and describe them with Civitai metadata")


@app.command()
def convert(
    file: str = typer.Option(..., "--file", "-f", help="The LoRA file that is either the safetensors or the PyTorch checkpoint."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="The name of the LoRA."),
    version: Optional[ModelVersion] = typer.Option(None, "--version", help="The model version for this LoRA."),
    scale_factor: Optional[float] = typer.Option(None, "--scale-factor", help="The model network scale factor for this LoRA."),
    output_directory: str = typer.Option(..., "--output-directory", "-o", help="The directory to write the output files to."),
    importer: Optional[str] = typer.Option(None, "--importer", help="Importer reference 'module:attribute' (default: LORA_CONVERTER_IMPORTER_TARGET)."),
) -> None:
    """Convert a LoRA file and print its descriptor as JSON."""
    setup_structured_logging(settings.logging.level, settings.logging.json_output)

    target = importer or settings.importer.target
    if not target:
        typer.echo("Error: no importer configured. Pass --importer or set LORA_CONVERTER_IMPORTER_TARGET.", err=True)
        raise typer.Exit(code=1)

    try:
        lora_importer = load_importer(target)
    except ImporterLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    orchestrator = ConversionOrchestrator(
        lora_importer,
        registry=RegistryClient(settings.registry.base_url, timeout=settings.registry.timeout),
    )
    overrides = CLIOverrides(name=name, version=version, scale_factor=scale_factor)

    try:
        descriptor = asyncio.run(orchestrator.run(overrides, file, output_directory))
    except (OSError, LoRAConverterError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    print(descriptor.to_json())


@app.command()
def config() -> None:
    """Show current configuration."""
    _, source = CredentialResolver().resolve_with_source()
    print(f"Registry: {settings.registry.base_url}")
    print(f"Timeout: {settings.registry.timeout if settings.registry.timeout is not None else '(default)'}")
    print(f"Importer: {settings.importer.target or '(none)'}")
    print(f"API Key: {f'found via {source}' if source else '(none)'}")
    print(f"Log Level: {settings.logging.level}")


if __name__ == "__main__":
    app()
