"""Civitai registry client: model version lookup by content fingerprint.

Every lookup resolves to exactly one of three outcomes:

- ``LookupSuccess``: HTTP 200 with a body that validates as a model version
- ``MissingOrInvalidCredential``: HTTP 401, actionable by supplying an API key
- ``NetworkError``: any other status, transport failure, malformed body, or a
  request that cannot be built (bad base URL, non-ASCII credential)

Failures are returned, not raised. A single request is issued per lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeAlias

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import DEFAULT_REGISTRY_BASE_URL

logger = logging.getLogger(__name__)

BY_HASH_PATH = "/model-versions/by-hash/{fingerprint}"


class _ModelPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class ModelVersionPayload(BaseModel):
    """Wire shape of a model version returned by the registry (unused fields ignored)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    model: _ModelPayload
    base_model: str | None = Field(default=None, alias="baseModel")
    trigger_words: list[str] | None = Field(default=None, alias="triggerWords")

    def to_record(self) -> RegistryRecord:
        return RegistryRecord(
            display_name=self.model.name,
            base_model_tag=self.base_model,
            trigger_words=tuple(self.trigger_words) if self.trigger_words is not None else None,
        )


@dataclass(frozen=True, slots=True)
class RegistryRecord:
    display_name: str
    base_model_tag: str | None = None
    trigger_words: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class LookupSuccess:
    record: RegistryRecord


@dataclass(frozen=True, slots=True)
class MissingOrInvalidCredential:
    """The registry rejected the request with 401."""

    status_code: int = 401


@dataclass(frozen=True, slots=True)
class NetworkError:
    message: str
    status_code: int | None = None


LookupFailure: TypeAlias = MissingOrInvalidCredential | NetworkError
LookupResult: TypeAlias = LookupSuccess | LookupFailure


class RegistryClient:
    """Look up registry metadata for an artifact fingerprint.

    Args:
        base_url: Registry API base URL.
        timeout: Request timeout in seconds. ``None`` keeps the httpx default.
        transport: Optional httpx transport (tests inject ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_BASE_URL,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def url_for(self, fingerprint: str) -> str:
        return self._base_url + BY_HASH_PATH.format(fingerprint=fingerprint)

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def lookup(self, fingerprint: str, credential: str | None = None) -> LookupResult:
        headers = {"Accept": "application/json"}
        if credential:
            headers["Authorization"] = f"Bearer {credential}"

        # A malformed base URL or a non-ASCII credential fails while the
        # request is built, before anything is sent.
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(self.url_for(fingerprint), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug(f"Registry request failed: {e!r}")
            return NetworkError(str(e) or type(e).__name__)

        return classify_response(response)


def classify_response(response: httpx.Response) -> LookupResult:
    """Map a registry HTTP response onto a lookup outcome."""
    status = response.status_code
    if status == 401:
        return MissingOrInvalidCredential()
    if status != 200:
        return NetworkError(f"Received status code {status} ({response.reason_phrase})", status_code=status)

    try:
        payload = ModelVersionPayload.model_validate_json(response.content)
    except ValidationError as e:
        return NetworkError(f"Malformed registry response: {e.error_count()} validation error(s)", status_code=status)
    return LookupSuccess(payload.to_record())
