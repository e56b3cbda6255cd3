"""GitHub REST client backed by a requests session."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import requests

from preview_pages.configuration.credentials import AppCredentials, Credentials, TokenCredentials

from .app_auth import create_app_jwt
from .host_protocol import GitHubRequestError, JsonObject

_LOGGER = logging.getLogger(__name__)

API_BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
REQUEST_TIMEOUT_SECONDS = 30
PAGE_SIZE = 100


class GitHubClient:
    """Thin GitHub REST client implementing :class:`PreviewBuildHost`."""

    def __init__(
        self,
        token: str,
        *,
        session: requests.Session | None = None,
        base_url: str = API_BASE_URL,
        app_info: JsonObject | None = None,
        max_attempts: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._token = token
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._app_info = app_info
        self._max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_credentials(
        cls, credentials: Credentials, *, session: requests.Session | None = None
    ) -> GitHubClient:
        """Build a client for a token, or exchange App credentials for an installation token."""
        resolved_session = session or requests.Session()
        if isinstance(credentials, TokenCredentials):
            _LOGGER.info("Running with GitHub Token. (Read only)")
            return cls(credentials.token, session=resolved_session)
        if isinstance(credentials, AppCredentials):
            _LOGGER.info("Running as GitHub App. (Read + Write)")
            app_client = cls(
                create_app_jwt(credentials.app_id, credentials.private_key),
                session=resolved_session,
            )
            app_info = app_client.request_json("GET", "/app")
            if not isinstance(app_info, dict) or not app_info.get("slug"):
                raise GitHubRequestError(200, "Failed to get app info.")
            _LOGGER.info("Running as %s.", app_info.get("name", app_info["slug"]))
            installations = app_client.request_json("GET", "/app/installations")
            if not installations:
                raise GitHubRequestError(404, "The GitHub App has no installations.")
            installation_id = installations[0]["id"]
            token = app_client.request_json(
                "POST", f"/app/installations/{installation_id}/access_tokens"
            )["token"]
            return cls(token, session=resolved_session, app_info=app_info)
        raise TypeError(f"Unsupported credentials: {type(credentials).__name__}")

    @property
    def app_info(self) -> JsonObject | None:
        return self._app_info

    def list_branches(self, repo: str) -> list[JsonObject]:
        return self.paginate(f"/repos/{repo}/branches")

    def list_open_pull_requests(self, repo: str) -> list[JsonObject]:
        return self.paginate(f"/repos/{repo}/pulls", params={"state": "open"})

    def list_check_runs(self, repo: str, ref: str) -> list[JsonObject]:
        encoded_ref = quote(ref, safe="")
        path = f"/repos/{repo}/commits/{encoded_ref}/check-runs"
        payload = self.request_json("GET", path, params={"per_page": PAGE_SIZE})
        return list(payload.get("check_runs", []))

    def get_job(self, repo: str, job_id: int) -> JsonObject:
        return self.request_json("GET", f"/repos/{repo}/actions/jobs/{job_id}")

    def list_run_artifacts(self, repo: str, run_id: int) -> list[JsonObject]:
        payload = self.request_json(
            "GET", f"/repos/{repo}/actions/runs/{run_id}/artifacts", params={"per_page": PAGE_SIZE}
        )
        return list(payload.get("artifacts", []))

    def resolve_artifact_download_url(self, repo: str, artifact_id: int) -> str:
        """Follow the archive endpoint's redirect to the short-lived blob URL."""
        response = self._send(
            "GET", f"/repos/{repo}/actions/artifacts/{artifact_id}/zip", allow_redirects=False
        )
        location = response.headers.get("Location")
        if not location:
            raise GitHubRequestError(response.status_code, "Artifact download URL missing.")
        return location

    def get_release_by_tag(self, repo: str, tag: str) -> JsonObject:
        encoded_tag = quote(tag, safe="")
        return self.request_json("GET", f"/repos/{repo}/releases/tags/{encoded_tag}")

    def create_release(
        self, repo: str, *, tag: str, name: str, body: str, prerelease: bool
    ) -> JsonObject:
        return self.request_json(
            "POST",
            f"/repos/{repo}/releases",
            json_body={"tag_name": tag, "name": name, "body": body, "prerelease": prerelease},
        )

    def upload_release_asset(self, release: JsonObject, name: str, data: bytes) -> JsonObject:
        upload_url = str(release["upload_url"]).split("{", 1)[0]
        response = self._send(
            "POST",
            upload_url,
            params={"name": name},
            data=data,
            headers={"Content-Type": "application/zip"},
        )
        return response.json()

    def list_issue_comments(self, repo: str, issue_number: int) -> list[JsonObject]:
        return self.paginate(f"/repos/{repo}/issues/{issue_number}/comments")

    def create_issue_comment(self, repo: str, issue_number: int, body: str) -> JsonObject:
        return self.request_json(
            "POST", f"/repos/{repo}/issues/{issue_number}/comments", json_body={"body": body}
        )

    def update_issue_comment(self, repo: str, comment_id: int, body: str) -> JsonObject:
        return self.request_json(
            "PATCH", f"/repos/{repo}/issues/comments/{comment_id}", json_body={"body": body}
        )

    def paginate(self, path: str, params: dict[str, Any] | None = None) -> list[JsonObject]:
        """Collect every page of a list endpoint by following ``Link: rel=next``."""
        items: list[JsonObject] = []
        url: str | None = path
        page_params: dict[str, Any] | None = {"per_page": PAGE_SIZE, **(params or {})}
        while url:
            response = self._send("GET", url, params=page_params)
            items.extend(response.json())
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            page_params = None
        return items

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        return self._send(method, path, params=params, json_body=json_body).json()

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        request_headers = {**self._headers(), **(headers or {})}
        for attempt in range(1, self._max_attempts + 1):
            _LOGGER.debug("%s %s (attempt %d)", method, url, attempt)
            try:
                response = self._session.request(
                    method,
                    url,
                    headers=request_headers,
                    params=params,
                    json=json_body,
                    data=data,
                    timeout=REQUEST_TIMEOUT_SECONDS,
                    allow_redirects=allow_redirects,
                )
            except requests.RequestException as exc:
                if attempt == self._max_attempts:
                    raise
                _LOGGER.warning("Network error on %s %s: %s", method, url, exc)
                self._sleep(_backoff_seconds(attempt))
                continue

            if _is_retryable(response) and attempt < self._max_attempts:
                retry_after = response.headers.get("Retry-After", "")
                delay = float(retry_after) if retry_after.isdigit() else _backoff_seconds(attempt)
                _LOGGER.warning(
                    "GitHub responded %d on %s %s, retrying in %.1fs",
                    response.status_code,
                    method,
                    url,
                    delay,
                )
                self._sleep(delay)
                continue

            if response.status_code >= 400:
                raise GitHubRequestError(response.status_code, _error_message(response))
            return response
        raise GitHubRequestError(0, "request failed unexpectedly")  # pragma: no cover

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "Authorization": f"Bearer {self._token}",
        }


def _is_retryable(response: requests.Response) -> bool:
    if response.status_code == 429 or 500 <= response.status_code < 600:
        return True
    return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"


def _backoff_seconds(attempt: int) -> float:
    return (2 ** (attempt - 1)) + random.uniform(0, 0.25)


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text[:200]
