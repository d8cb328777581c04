"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sshare.common.models import Publication
    from sshare.keys.key import Key


class AgentTransport(Protocol):
    """Socket-like object carrying the SSH agent protocol."""

    def sendall(self, data: bytes) -> None: ...

    def recv(self, bufsize: int) -> bytes: ...

    def close(self) -> None: ...


class KeySelector(Protocol):
    """Chooses a subset of keys, usually by asking a human."""

    def __call__(self, keys: Sequence[Key]) -> list[Key]: ...


class RemoteStore(Protocol):
    """Publish text to a remote store and get back where it lives."""

    def publish(self, data: str) -> Publication: ...


class DeletableStore(RemoteStore, Protocol):
    """Remote store that can remove an upload before it expires."""

    def delete(self, locator: str, credential: str) -> None: ...
