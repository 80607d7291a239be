"""LinkedIn engagement data provider client (RapidAPI ``linkedin-api8``).

One method per provider stream, each returning a single page of the decoded
JSON body.  Pagination lives in :mod:`backend.app.services.pagination`; this
module only performs requests and maps transport failures and non-2xx
responses to :class:`ProviderError`.

Endpoints
---------
- ``GET  /get-profile-posts``          : ``username``, ``start``, ``paginationToken``
- ``POST /get-post-reactions``         : ``url``, ``page``, ``reactionType``
- ``GET  /get-profile-posts-comments`` : ``urn``, ``sort``, ``page``, ``paginationToken``
- ``POST /posts/reposts``              : ``urn``, ``page``, ``paginationToken``
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from backend.app.core.errors import ProviderError
from backend.app.core.settings import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class EngagementProvider(Protocol):
    """Minimal interface the collector needs from a data provider."""

    def get_profile_posts(
        self, username: str, start: int, pagination_token: str | None = None,
    ) -> dict[str, Any]: ...

    def get_post_reactions(self, post_url: str, page: int) -> dict[str, Any]: ...

    def get_post_comments(
        self, urn: str, page: int, pagination_token: str | None = None,
    ) -> dict[str, Any]: ...

    def get_post_reposts(
        self, urn: str, page: int, pagination_token: str | None = None,
    ) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# RapidAPI implementation
# ---------------------------------------------------------------------------


class LinkedInClient:
    """Synchronous httpx client for the RapidAPI LinkedIn provider.

    Pass *client* to supply a preconfigured :class:`httpx.Client` (tests use
    one backed by :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        host: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        host = host or settings.rapidapi_host
        key = api_key if api_key is not None else settings.rapidapi_key
        self._client = client or httpx.Client(
            base_url=f"https://{host}",
            headers={
                "x-rapidapi-host": host,
                "x-rapidapi-key": key or "",
            },
            timeout=timeout_seconds or settings.provider_timeout_seconds,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LinkedInClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        label: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise ProviderError(f"{label} API request failed: {exc}") from exc

        if resp.is_error:
            raise ProviderError(
                f"{label} API failed: {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise ProviderError(
                f"{label} API returned invalid JSON",
                status_code=resp.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                f"{label} API returned an unexpected payload",
                status_code=resp.status_code,
            )
        return body

    def get_profile_posts(
        self, username: str, start: int, pagination_token: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"username": username, "start": str(start)}
        if pagination_token:
            params["paginationToken"] = pagination_token
        return self._request("GET", "/get-profile-posts", label="Posts", params=params)

    def get_post_reactions(self, post_url: str, page: int) -> dict[str, Any]:
        return self._request(
            "POST",
            "/get-post-reactions",
            label="Reactions",
            json={"url": post_url, "page": page, "reactionType": ""},
        )

    def get_post_comments(
        self, urn: str, page: int, pagination_token: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"urn": urn, "sort": "mostRelevant", "page": str(page)}
        if pagination_token:
            params["paginationToken"] = pagination_token
        return self._request(
            "GET", "/get-profile-posts-comments", label="Comments", params=params,
        )

    def get_post_reposts(
        self, urn: str, page: int, pagination_token: str | None = None,
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            "/posts/reposts",
            label="Reposts",
            json={"urn": urn, "page": page, "paginationToken": pagination_token or ""},
        )
