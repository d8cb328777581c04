"""
Client for the SSH agent protocol, limited to listing keys.

Only the identity listing, lock and unlock requests are spoken. When a
passphrase is configured the agent is unlocked for exactly one listing and
locked again afterwards.
"""

from __future__ import annotations

import base64
import logging
import socket
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sshare.common.config import Config
from sshare.common.exceptions import AgentConnectionError, AgentError, KeyParseError
from sshare.keys.key import Key
from sshare.keys.wire import (
    WireFormatError,
    pack_string,
    pack_uint32,
    read_string,
    read_uint32,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sshare.common.interfaces import AgentTransport

logger = logging.getLogger(__name__)

# Message numbers from draft-miller-ssh-agent
SSH_AGENT_FAILURE = 5
SSH_AGENT_SUCCESS = 6
SSH_AGENTC_REQUEST_IDENTITIES = 11
SSH_AGENT_IDENTITIES_ANSWER = 12
SSH_AGENTC_LOCK = 22
SSH_AGENTC_UNLOCK = 23


@dataclass
class AgentKeys:
    """Keys listed by an agent plus any non-fatal re-lock failure."""

    keys: list[Key] = field(default_factory=list)
    warning: str | None = None

    @property
    def relock_failed(self) -> bool:
        return self.warning is not None

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)


class KeyAgent:
    """Connection to a running SSH agent."""

    def __init__(
        self,
        transport: AgentTransport,
        path: str = "",
        passphrase: str | None = None,
        max_reply_len: int | None = None,
    ) -> None:
        self._transport = transport
        self.path = path
        self.passphrase = passphrase or None
        self.max_reply_len = max_reply_len or Config().MAX_AGENT_REPLY_LEN

    @classmethod
    def connect(
        cls,
        path: str,
        passphrase: str | None = None,
        timeout: float | None = None,
    ) -> KeyAgent:
        """Open a connection to the agent listening on a unix socket.

        Args:
            path: Filesystem path of the agent socket, usually $SSH_AUTH_SOCK
            passphrase: Passphrase the agent is locked with, if any
            timeout: Socket timeout in seconds

        Returns:
            A connected agent client; the caller must close it

        Raises:
            AgentConnectionError: If the socket can not be reached
        """
        if not path:
            msg = "failed to connect to agent socket: no path given"
            raise AgentConnectionError(msg)
        if timeout is None:
            timeout = Config().AGENT_TIMEOUT
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(timeout)
        try:
            sock.connect(path)
        except OSError as err:
            sock.close()
            msg = f"failed to connect to agent socket {path}: {err}"
            raise AgentConnectionError(msg) from err
        logger.debug("Connected to SSH agent at %s", path)
        return cls(sock, path=path, passphrase=passphrase)

    def with_passphrase(self, passphrase: str) -> KeyAgent:
        self.passphrase = passphrase or None
        return self

    def close(self) -> None:
        self._transport.close()
        logger.debug("Closed SSH agent connection %s", self.path or "<transport>")

    def __enter__(self) -> KeyAgent:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def list_keys(self) -> AgentKeys:
        """Retrieve every key held by the agent.

        If a passphrase is configured the agent is unlocked first and locked
        again after a successful listing. A failed re-lock does not discard
        the keys; it is reported through ``AgentKeys.warning``.

        Raises:
            AgentError: If unlocking, listing or key conversion fails
        """
        if self.passphrase:
            self._unlock(self.passphrase)

        keys = self._request_identities()
        result = AgentKeys(keys=keys)

        if self.passphrase:
            try:
                self._lock(self.passphrase)
            except AgentError as err:
                logger.warning("Agent could not be re-locked: %s", err)
                result.warning = err.message
        return result

    def _unlock(self, passphrase: str) -> None:
        reply = self._request(SSH_AGENTC_UNLOCK, pack_string(passphrase.encode()))
        if reply[0] != SSH_AGENT_SUCCESS:
            msg = "failed to unlock ssh agent: agent refused passphrase"
            raise AgentError(msg)
        logger.debug("Agent unlocked")

    def _lock(self, passphrase: str) -> None:
        reply = self._request(SSH_AGENTC_LOCK, pack_string(passphrase.encode()))
        if reply[0] != SSH_AGENT_SUCCESS:
            msg = "failed to lock ssh agent: agent refused lock request"
            raise AgentError(msg)
        logger.debug("Agent locked")

    def _request_identities(self) -> list[Key]:
        reply = self._request(SSH_AGENTC_REQUEST_IDENTITIES, b"")
        if reply[0] != SSH_AGENT_IDENTITIES_ANSWER:
            msg = f"failed to get keys from agent: unexpected reply type {reply[0]}"
            raise AgentError(msg)

        keys: list[Key] = []
        try:
            count, offset = read_uint32(reply, 1)
            for _ in range(count):
                blob, offset = read_string(reply, offset)
                comment_bytes, offset = read_string(reply, offset)
                key_type, _ = read_string(blob, 0)
                comment = comment_bytes.decode("utf-8", errors="replace")
                raw = f"{key_type.decode('ascii')} {base64.b64encode(blob).decode()}"
                if comment:
                    raw = f"{raw} {comment}"
                keys.append(Key.parse(raw, comment))
        except (WireFormatError, UnicodeDecodeError) as err:
            msg = f"failed to get keys from agent: malformed reply: {err}"
            raise AgentError(msg) from err
        except KeyParseError as err:
            msg = f"failed to parse key from agent: {err}"
            raise AgentError(msg) from err

        logger.debug("Agent listed %d key(s)", len(keys))
        return keys

    def _request(self, message_type: int, payload: bytes) -> bytes:
        body = bytes([message_type]) + payload
        try:
            self._transport.sendall(pack_uint32(len(body)) + body)
            header = self._recv_exact(4)
            length, _ = read_uint32(header, 0)
            if length == 0 or length > self.max_reply_len:
                msg = f"agent reply length {length} out of range"
                raise AgentError(msg)
            return self._recv_exact(length)
        except OSError as err:
            msg = f"agent communication failed: {err}"
            raise AgentError(msg) from err

    def _recv_exact(self, size: int) -> bytes:
        chunks = []
        remaining = size
        while remaining:
            chunk = self._transport.recv(remaining)
            if not chunk:
                msg = "agent closed the connection"
                raise AgentError(msg)
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)
