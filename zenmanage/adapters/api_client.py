"""
HTTP client for the Zenmanage API.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Set
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from ..config import DEFAULT_API_ENDPOINT
from ..context import Context
from ..errors import FetchRulesError, InvalidRulesError
from ..logging import Logger, NullLogger
from ..retry import RetryConfig, RetryError, retry_async

CLIENT_VERSION = "1.0.0"
CLIENT_AGENT = "zenmanage-python"
RULES_PATH = "/v1/flag-json"
CONTEXT_HEADER = "X-ZENMANAGE-CONTEXT"


class FlagMetadata(BaseModel):
    """Location of the published rule set."""
    cdn: StrictStr
    path: StrictStr


class FlagMetadataResponse(BaseModel):
    """Response of the rules metadata endpoint."""
    data: FlagMetadata


class RulesDocument(BaseModel):
    """Rule set as published by the service."""

    model_config = ConfigDict(extra="allow")

    version: StrictStr
    flags: List[Dict[str, Any]]


class ApiClient:
    """Client for fetching rules and reporting flag usage.

    Rules are fetched in two steps: the API names the CDN location of the
    current rule set, then the document is downloaded from there. Both steps
    are retried together with exponential backoff.
    """

    def __init__(self,
                 environment_token: str,
                 api_endpoint: str = DEFAULT_API_ENDPOINT,
                 logger: Optional[Logger] = None,
                 enable_usage_reporting: bool = False,
                 retry_config: Optional[RetryConfig] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 10.0):
        self.base_url = api_endpoint.rstrip("/")
        self.logger = logger or NullLogger()
        self.enable_usage_reporting = enable_usage_reporting
        self.retry_config = retry_config or RetryConfig(
            max_attempts=3,
            base_delay=0.1,
            max_delay=2.0,
            exponential_base=2.0,
            jitter=True
        )
        self.timeout = timeout
        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-API-Key": environment_token,
            "X-ZEN-CLIENT-AGENT": f"{CLIENT_AGENT}/{CLIENT_VERSION}",
        }

        self._client = http_client
        self._owns_client = http_client is None
        self._pending_reports: Set[asyncio.Task] = set()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def get_rules(self) -> RulesDocument:
        """Fetch the current rule set.

        Raises ``FetchRulesError`` once retries are exhausted and
        ``InvalidRulesError`` as soon as a response has the wrong shape.
        """
        try:
            return await retry_async(
                self._fetch_rules,
                exceptions=(FetchRulesError, httpx.HTTPError),
                config=self.retry_config,
                logger=self.logger,
                name="get_rules"
            )
        except RetryError as e:
            last = e.last_exception
            raise FetchRulesError(
                f"Failed to fetch rules after {e.attempts} attempts: {last}",
                status_code=getattr(last, "status_code", None)
            ) from last

    async def _fetch_rules(self) -> RulesDocument:
        cdn_url = await self._get_cdn_rules_url()

        self.logger.debug("Fetching rules from CDN", url=cdn_url)

        response = await self._get_client().get(cdn_url, headers={"Accept": "application/json"})

        if not response.is_success:
            raise FetchRulesError(
                f"CDN request failed with status {response.status_code}",
                status_code=response.status_code
            )

        try:
            document = RulesDocument.model_validate(self._decode(response))
        except ValidationError as e:
            raise InvalidRulesError(
                "Invalid response format from CDN",
                details={"errors": [error["msg"] for error in e.errors()]}
            ) from e

        self.logger.info(
            "Successfully fetched rules from CDN",
            size=len(response.content),
            flags=len(document.flags)
        )

        return document

    async def _get_cdn_rules_url(self) -> str:
        url = f"{self.base_url}{RULES_PATH}"

        self.logger.debug("Fetching rules metadata from API", endpoint=url)

        response = await self._get_client().get(url, headers=self.headers)

        if not response.is_success:
            raise FetchRulesError(
                f"API metadata request failed with status {response.status_code}",
                status_code=response.status_code
            )

        try:
            metadata = FlagMetadataResponse.model_validate(self._decode(response))
        except ValidationError as e:
            raise InvalidRulesError(
                "API response missing cdn or path fields",
                details={"errors": [error["msg"] for error in e.errors()]}
            ) from e

        return metadata.data.cdn + metadata.data.path

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise InvalidRulesError("Response body is not valid JSON", details={"error": str(e)}) from e

    async def report_usage(self, key: str, context: Optional[Context] = None) -> None:
        """Report that ``key`` was read. Returns without waiting for the API."""
        self.logger.debug(
            "Usage report requested",
            key=key,
            enabled=self.enable_usage_reporting,
            has_context=context is not None
        )

        if not self.enable_usage_reporting:
            return

        url = f"{self.base_url}/v1/flags/{quote(key, safe='')}/usage"
        headers = dict(self.headers)
        if context is not None:
            headers[CONTEXT_HEADER] = json.dumps(context.to_dict())

        task = asyncio.create_task(self._send_usage(url, headers, key))
        self._pending_reports.add(task)
        task.add_done_callback(self._pending_reports.discard)

    async def _send_usage(self, url: str, headers: Dict[str, str], key: str) -> None:
        try:
            response = await self._get_client().post(url, headers=headers)
            if not response.is_success:
                self.logger.debug("Usage report rejected", key=key, status_code=response.status_code)
        except Exception as e:
            self.logger.debug("Failed to report usage", key=key, error=str(e))

    async def flush(self) -> None:
        """Wait for in-flight usage reports."""
        if self._pending_reports:
            await asyncio.gather(*list(self._pending_reports), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain usage reports and close the HTTP client if this instance created it."""
        await self.flush()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
