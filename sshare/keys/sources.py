"""
Collects keys from files, raw strings, an SSH agent and GitHub.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sshare.common.exceptions import SelectionError
from sshare.keys.agent import KeyAgent
from sshare.keys.key import Key, render_authorized_keys

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sshare.common.interfaces import KeySelector
    from sshare.github import GitHubKeys

logger = logging.getLogger(__name__)


class KeySources:
    """Ordered accumulation of the keys chosen for sharing."""

    def __init__(self) -> None:
        self.keys: list[Key] = []
        self.warnings: list[str] = []

    def add_files(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.keys.append(Key.from_file(path))

    def add_raw(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.keys.append(Key.parse(line))

    def add_agent(
        self,
        path: str,
        selector: KeySelector,
        passphrase: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """List the agent's keys and keep the ones the selector picks."""
        with KeyAgent.connect(path, passphrase=passphrase, timeout=timeout) as agent:
            listed = agent.list_keys()
        if listed.warning:
            self.warnings.append(listed.warning)
        self._add_selected(listed.keys, selector, "SSH agent")

    def add_github(self, client: GitHubKeys, selector: KeySelector) -> None:
        self._add_selected(client.list_keys(), selector, "GitHub")

    def _add_selected(
        self, candidates: Sequence[Key], selector: KeySelector, source: str
    ) -> None:
        if not candidates:
            msg = f"no keys were found in the {source}"
            raise SelectionError(msg)
        chosen = selector(candidates)
        if not chosen:
            msg = "no keys were selected"
            raise SelectionError(msg)
        logger.debug("Selected %d of %d key(s) from %s", len(chosen), len(candidates), source)
        self.keys.extend(chosen)

    def render(self) -> str:
        return render_authorized_keys(self.keys)
