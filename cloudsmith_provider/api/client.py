"""Cloudsmith HTTP API client implementation."""

import time
from typing import Any
from urllib.parse import quote

import requests

from cloudsmith_provider.errors import (
    ApiError,
    NotFoundError,
    TransportError,
    UnprocessableError,
)
from cloudsmith_provider.logger import get_logger

from .types import GeoIpRules, SamlGroupSync, SamlGroupSyncRequest

logger = get_logger("api")

DEFAULT_API_HOST = "https://api.cloudsmith.io/v1"
DEFAULT_TIMEOUT_S = 30
USER_AGENT = "cloudsmith-provider-python/0.1.0"


class CloudsmithHttpClient:
    """Cloudsmith REST API client over requests."""

    def __init__(
        self,
        api_key: str,
        api_host: str = DEFAULT_API_HOST,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: requests.Session | None = None,
    ):
        """Initialize client.

        Args:
            api_key: Cloudsmith API key, sent as X-Api-Key
            api_host: Base URL including the API version
            timeout_s: Per-request timeout in seconds
            session: Optional pre-built session (tests inject a mock)
        """
        self.api_host = api_host.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "X-Api-Key": api_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    # --- Repository Geo/IP rules ---

    def enable_geoip(self, namespace: str, repository: str) -> None:
        self._request("POST", f"/repos/{_seg(namespace)}/{_seg(repository)}/geoip/enable/")

    def read_geoip(self, namespace: str, repository: str) -> GeoIpRules:
        data = self._request("GET", f"/repos/{_seg(namespace)}/{_seg(repository)}/geoip")
        return GeoIpRules.from_dict(data or {})

    def update_geoip(self, namespace: str, repository: str, rules: GeoIpRules) -> None:
        self._request(
            "PUT",
            f"/repos/{_seg(namespace)}/{_seg(repository)}/geoip",
            json=rules.to_dict(),
        )

    # --- Organization SAML group sync ---

    def create_saml_group_sync(
        self,
        organization: str,
        request: SamlGroupSyncRequest,
    ) -> SamlGroupSync:
        data = self._request(
            "POST",
            f"/orgs/{_seg(organization)}/saml-group-sync/",
            json=request.to_dict(),
        )
        if not data or not data.get("slug_perm"):
            raise ApiError(201, "No slug_perm in SAML group sync create response")
        return SamlGroupSync.from_dict(data)

    def list_saml_group_sync(
        self,
        organization: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[SamlGroupSync]:
        params = {}
        if page is not None:
            params["page"] = page
        if page_size is not None:
            params["page_size"] = page_size

        data = self._request(
            "GET",
            f"/orgs/{_seg(organization)}/saml-group-sync/",
            params=params or None,
        )
        return [SamlGroupSync.from_dict(item) for item in data or []]

    def delete_saml_group_sync(self, organization: str, slug_perm: str) -> None:
        self._request(
            "DELETE",
            f"/orgs/{_seg(organization)}/saml-group-sync/{_seg(slug_perm)}/",
        )

    # --- Transport ---

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a request and translate failures into provider errors.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            TransportError: If the request did not complete
            NotFoundError: For HTTP 404
            UnprocessableError: For HTTP 422
            ApiError: For any other HTTP error status
        """
        url = f"{self.api_host}{path}"
        start_time = time.time()

        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                timeout=self.timeout_s,
            )
        except requests.Timeout as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            raise TransportError(
                f"{method} {path} timed out after {elapsed_ms}ms "
                f"(timeout: {self.timeout_s}s)"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "api.request",
            method=method,
            path=path,
            status_code=response.status_code,
            elapsed_ms=elapsed_ms,
        )

        status = response.status_code
        if status >= 400:
            body = response.text or ""
            detail = _error_detail(response)
            if status == 404:
                raise NotFoundError(f"{method} {path}: not found (HTTP 404)", body)
            if status == 422:
                raise UnprocessableError(
                    f"{method} {path}: unprocessable (HTTP 422){detail}", body
                )
            if status in (401, 403):
                raise ApiError(
                    status,
                    f"Authentication failed (HTTP {status}). "
                    "Check your CLOUDSMITH_API_KEY.",
                    body,
                )
            if status == 429:
                raise ApiError(
                    status,
                    f"Rate limit exceeded (HTTP {status}). Please retry later.",
                    body,
                )
            raise ApiError(status, f"{method} {path}: HTTP {status}{detail}", body)

        if status == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(status, f"{method} {path}: response is not valid JSON") from e


def _seg(value: str) -> str:
    """Quote a single URL path segment."""
    return quote(str(value), safe="")


def _error_detail(response: requests.Response) -> str:
    """Pull the API's 'detail' message out of an error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return ""
    if isinstance(data, dict) and data.get("detail"):
        return f": {data['detail']}"
    return ""
