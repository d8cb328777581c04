"""
Lists the SSH keys registered on the authenticated GitHub account.
"""

from __future__ import annotations

import logging

import requests
from pydantic import TypeAdapter, ValidationError

from sshare.common.config import Config
from sshare.common.exceptions import GitHubError, KeyParseError
from sshare.common.models import GitHubKey
from sshare.keys.key import Key
from sshare.stores.base import join_url, validate_base_url

logger = logging.getLogger(__name__)

_KEY_LIST = TypeAdapter(list[GitHubKey])


class GitHubKeys:
    """Key source backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        config = Config()
        self.token = token
        self.api_url = validate_base_url(api_url or config.GITHUB_API_URL)
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def list_keys(self) -> list[Key]:
        """Return the account's keys, named by their GitHub titles.

        Raises:
            GitHubError: If GitHub can not be reached, refuses the token, or
                returns a key that does not parse
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            r = requests.get(
                join_url(self.api_url, "user", "keys"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            msg = f"failed to obtain users ssh keys from github: {err}"
            raise GitHubError(msg) from err
        if r.status_code != 200:  # noqa: PLR2004
            msg = f"failed to obtain users ssh keys from github: status {r.status_code}"
            raise GitHubError(msg)

        try:
            entries = _KEY_LIST.validate_python(r.json())
        except (ValueError, ValidationError) as err:
            msg = f"unexpected response from github: {err}"
            raise GitHubError(msg) from err

        keys = []
        for entry in entries:
            try:
                keys.append(Key.parse(entry.key, entry.title))
            except KeyParseError as err:
                msg = f"failed to parse key from github: {err}"
                raise GitHubError(msg) from err
        logger.debug("GitHub listed %d key(s)", len(keys))
        return keys
