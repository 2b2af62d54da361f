"""Pytest configuration and fixtures for lora-converter tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
import structlog

from lora_converter.config import API_KEY_ENV_VAR
from lora_converter.conversion import ConversionOutcome, ConversionRequest, ModelVersion
from lora_converter.registry import RegistryClient

REGISTRY_BASE_URL = "https://registry.test/api/v1"

MODEL_VERSION_PAYLOAD = {
    "id": 1234,
    "model": {"name": "Foo", "type": "LORA"},
    "baseModel": "bar",
    "triggerWords": ["a", "b"],
}


def pytest_configure(config):
    """Register custom markers and route structlog through stdlib logging."""
    config.addinivalue_line("markers", "slow: Tests that take longer to run")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@dataclass
class MockRegistry:
    """Registry stand-in served through httpx.MockTransport."""

    status_code: int = 200
    payload: object = field(default_factory=lambda: dict(MODEL_VERSION_PAYLOAD))
    raw_body: bytes | None = None
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.payload)

    def client(self) -> RegistryClient:
        return RegistryClient(REGISTRY_BASE_URL, transport=httpx.MockTransport(self.handler))


class RecordingImporter:
    """Importer stand-in that records requests and returns a fixed outcome."""

    def __init__(self, outcome: ConversionOutcome | None = None, error: Exception | None = None) -> None:
        self.outcome = outcome or ConversionOutcome(
            version=ModelVersion.SDXL_BASE,
            has_text_embedding=False,
            text_embedding_length=0,
            is_alternate_decomposition=False,
        )
        self.error = error
        self.requests: list[ConversionRequest] = []

    def import_lora(self, request: ConversionRequest) -> ConversionOutcome:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def mock_registry() -> MockRegistry:
    return MockRegistry()


@pytest.fixture
def importer() -> RecordingImporter:
    return RecordingImporter()


@pytest.fixture
def lora_file(tmp_path: Path) -> Path:
    path = tmp_path / "my_style.safetensors"
    path.write_bytes(b"\x08\x00\x00\x00\x00\x00\x00\x00{}      " + bytes(range(256)))
    return path


@pytest.fixture
def isolated_credentials(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Remove every credential source: env var, ~/.env and keyring.

    Returns the fake home directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    monkeypatch.setattr("lora_converter.credentials.keyring.get_password", lambda service, account: None)
    return home
