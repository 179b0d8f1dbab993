"""GitHub API client for registering SSH public keys."""

from dataclasses import dataclass
from typing import Any

import httpx

from .errors import RemoteError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_API_VERSION = "2022-11-28"
DEFAULT_USER_AGENT = "github-ssh-manager"
DEFAULT_TIMEOUT = 20.0


@dataclass
class RegisteredKey:
    """A key as reported back by the API."""
    id: int
    title: str
    message: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RegisteredKey":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            message=data.get("message"),
        )


class GitHubClient:
    """Minimal client for the `POST /user/keys` endpoint.

    The token is passed per call and never kept on the client.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_version: str = DEFAULT_API_VERSION,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": user_agent,
        }
        self.client = httpx.Client(
            base_url=self.api_url,
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.client.close()

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise RemoteError(
                response.status_code,
                f"GitHub API returned an unreadable response (status {response.status_code})",
            )
        if not isinstance(data, dict):
            raise RemoteError(
                response.status_code,
                f"GitHub API returned an unexpected response (status {response.status_code})",
            )
        return data

    def register(self, token: str, title: str, public_key: str) -> RegisteredKey:
        """Register a public key on the token owner's account.

        Args:
            token: Personal access token with admin:public_key scope
            title: Title shown for the key on GitHub
            public_key: OpenSSH public key text

        Returns:
            The registered key's id and title

        Raises:
            RemoteError: If the request fails or GitHub rejects the key
        """
        try:
            response = self.client.post(
                "/user/keys",
                json={"title": title, "key": public_key},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise RemoteError(None, f"Request to GitHub failed: {e}")

        data = self._decode(response)

        if not response.is_success:
            message = data.get("message") or f"GitHub API returned status {response.status_code}"
            raise RemoteError(response.status_code, message, data)

        if not isinstance(data.get("id"), int):
            raise RemoteError(
                response.status_code,
                "GitHub API response did not include a key id",
                data,
            )

        return RegisteredKey.from_dict(data)
