"""Git refs API wrapper — the single network seam for all lock operations."""

from datetime import datetime, timezone
from urllib.parse import quote

import httpx

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
DEFAULT_TIMEOUT = 10.0

# Age reported for a lock whose ref does not exist.
ABSENT = -1


class BackendError(Exception):
    """A refs API call failed or returned an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InconsistentReadError(BackendError):
    """The lock ref exists but the commit it points at could not be read."""


def ref_path(name: str) -> str:
    return f"locks/{name}"


def lock_ref(name: str) -> str:
    """Fully qualified ref backing the lock *name*."""
    return f"refs/{ref_path(name)}"


def _quoted_path(name: str) -> str:
    """ref_path for use in a URL; '#', '?' etc. are percent-encoded."""
    return quote(ref_path(name), safe="/")


def _parse_date(value: str) -> datetime:
    """Parse an RFC3339 timestamp as returned by the commits API."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _describe(response: httpx.Response) -> str:
    return f"unexpected status {response.status_code}: {response.text}"


class RefBackend:
    """Create, delete and age-check lock refs in one repository.

    No call is retried here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        repository: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.repository = repository
        self.client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"/repos/{self.repository}/git/{path}"
        try:
            return self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise BackendError(f"{method} {url} failed: {e}") from e

    def try_create(self, name: str, sha: str) -> bool:
        """Create the lock ref pointing at *sha*.

        Returns True if created, False if the ref already exists.
        """
        response = self._request("POST", "refs", json={"ref": lock_ref(name), "sha": sha})
        if response.status_code == 201:
            return True
        # 422 = ref already exists (lock held)
        if response.status_code == 422:
            return False
        raise BackendError(_describe(response), response.status_code)

    def delete(self, name: str) -> None:
        """Delete the lock ref. A ref that is already gone counts as deleted."""
        response = self._request("DELETE", f"refs/{_quoted_path(name)}")
        if response.status_code in (204, 404):
            return
        raise BackendError(_describe(response), response.status_code)

    def read_age(self, name: str) -> int:
        """Return the lock age in whole seconds, or ABSENT if there is no lock.

        Age is measured from the committer date of the commit the ref points at.
        """
        sha = self._ref_sha(name)
        if sha is None:
            return ABSENT
        try:
            committed = self._commit_date(sha)
        except BackendError as e:
            raise InconsistentReadError(
                f"lock {name!r} points at {sha} but its commit could not be read: {e}",
                e.status_code,
            ) from e
        # A commit dated slightly in the future still counts as held
        return max(int((datetime.now(timezone.utc) - committed).total_seconds()), 0)

    def _ref_sha(self, name: str) -> str | None:
        response = self._request("GET", f"ref/{_quoted_path(name)}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise BackendError(_describe(response), response.status_code)
        try:
            return response.json()["object"]["sha"]
        except (ValueError, KeyError, TypeError) as e:
            raise BackendError(f"malformed ref response: {e}") from e

    def _commit_date(self, sha: str) -> datetime:
        response = self._request("GET", f"commits/{quote(sha, safe='')}")
        if response.status_code != 200:
            raise BackendError(f"commit not found: {response.status_code}", response.status_code)
        try:
            return _parse_date(response.json()["committer"]["date"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise BackendError(f"malformed commit response: {e}") from e

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
