"""Shared test data and fakes."""

from __future__ import annotations

import base64
import socket
import threading
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from requests.structures import CaseInsensitiveDict

from sshare.keys.agent import (
    SSH_AGENT_FAILURE,
    SSH_AGENT_IDENTITIES_ANSWER,
    SSH_AGENT_SUCCESS,
    SSH_AGENTC_LOCK,
    SSH_AGENTC_REQUEST_IDENTITIES,
    SSH_AGENTC_UNLOCK,
)
from sshare.keys.wire import pack_string, pack_uint32, read_string, read_uint32

ED25519_LINE = (
    "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIC7iWBz99RNiepMdolkqPB9vevBsGNLleYTkZqYkoEds"
    " ed25519@example"
)
ED25519_FINGERPRINT = "SHA256:W5WI9FjQOzsNvZ6g12K+jHQKC/jaWzUrJw485u8o974"

ECDSA_LINE = (
    "ecdsa-sha2-nistp256 AAAAE2VjZHNhLXNoYTItbmlzdHAyNTYAAAAIbmlzdHAyNTYAAABBBNPnB+jPgtLxi3X5"
    "jLv0zzRxjJ6I0v3k/WkRGBuRE1/21RNdaIZhAZ5e3wII0bNR/xHxKngtUEWipObkzYbhfD0= ecdsa@example"
)
ECDSA_FINGERPRINT = "SHA256:RUzL8V/DqaGG/J2PDeDjHdH/ioPMdAA+t9NeUyfInMA"

RSA_LINE = (
    "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQDW2EABqwbhNauRY1/RQYC1uOO03m7bbHqkfbRe9G3LrIpPwxrr0k"
    "Nj8cLcH+i/TscS930JF5/sIw44kRrsyY3ik3tTRjJfEs1op1rTdEA3Ce6/lcYDDASK83jl8f3YWC/Sy0bIW0Tya"
    "cBV/Pt2f5CQRLLiFCChlPGHnGNGqUIic3C7OYIcMwrEjvOgTSSv66pfgKR2hZJdBwZ8C/OOZyiAb4gnjMPFp28uJ"
    "3reTch4x3LQ7FHY+tCV9eTtu0l+Ul1+QYQciHWzu7LMIAMzd0pVsHe99kFF/SSc6Zk8bSacbxpdHKv5BE22N68"
    "T9LOfGKVMq2fq/PBVkt3yuXbfFSJP rsa@example"
)
RSA_FINGERPRINT = "SHA256:Cdv0iE+wkABsKPzP/POTX368HuXFNZ6pL1rNrIZTmwA"


def certificate_line(line: str = ED25519_LINE, comment: str = "alice@laptop") -> str:
    """Certify the public key of an authorized_keys line with a throwaway CA."""
    ca_key = ed25519.Ed25519PrivateKey.generate()
    certificate = (
        serialization.SSHCertificateBuilder()
        .public_key(serialization.load_ssh_public_key(line.encode()))
        .serial(1)
        .type(serialization.SSHCertificateType.USER)
        .key_id(b"alice")
        .valid_principals([b"alice"])
        .valid_after(0)
        .valid_before(2**64 - 1)
        .sign(ca_key)
    )
    return f"{certificate.public_bytes().decode()} {comment}"


class MockResponse:
    def __init__(
        self,
        status_code: int,
        text: str = "",
        headers: dict[str, str] | None = None,
        json_data: Any = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = CaseInsensitiveDict(headers or {})
        self._json = json_data

    def json(self) -> Any:
        return self._json


class RecordingTransport:
    """Stands in for a requests function, returning canned responses."""

    def __init__(self, *responses: MockResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, url: str, **kwargs: Any) -> MockResponse:
        self.calls.append((url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _agent_identity(line: str) -> tuple[bytes, bytes]:
    fields = line.split(None, 2)
    comment = fields[2] if len(fields) > 2 else ""  # noqa: PLR2004
    return base64.b64decode(fields[1]), comment.encode()


class FakeAgent:
    """In-process SSH agent speaking over one end of a socket pair.

    Like OpenSSH's agent, it lists no identities while locked.
    """

    def __init__(
        self,
        lines: list[str],
        passphrase: str = "",
        *,
        locked: bool = False,
        refuse_lock: bool = False,
        raw_identities: list[tuple[bytes, bytes]] | None = None,
    ) -> None:
        self.identities = raw_identities or [_agent_identity(line) for line in lines]
        self.passphrase = passphrase
        self.locked = locked
        self.refuse_lock = refuse_lock
        self.requests: list[int] = []
        self.client_sock, self._server_sock = socket.socketpair()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _recv_exact(self, size: int) -> bytes | None:
        data = b""
        while len(data) < size:
            chunk = self._server_sock.recv(size - len(data))
            if not chunk:
                return None
            data += chunk
        return data

    def _reply(self, body: bytes) -> None:
        self._server_sock.sendall(pack_uint32(len(body)) + body)

    def _serve(self) -> None:
        with self._server_sock:
            while True:
                header = self._recv_exact(4)
                if header is None:
                    return
                length, _ = read_uint32(header, 0)
                message = self._recv_exact(length)
                if message is None:
                    return
                self.requests.append(message[0])
                self._reply(self._handle(message[0], message[1:]))

    def _handle(self, message_type: int, payload: bytes) -> bytes:
        if message_type == SSH_AGENTC_REQUEST_IDENTITIES:
            identities = [] if self.locked else self.identities
            body = bytes([SSH_AGENT_IDENTITIES_ANSWER]) + pack_uint32(len(identities))
            for blob, comment in identities:
                body += pack_string(blob) + pack_string(comment)
            return body
        if message_type == SSH_AGENTC_UNLOCK:
            passphrase, _ = read_string(payload, 0)
            if self.locked and passphrase.decode() == self.passphrase:
                self.locked = False
                return bytes([SSH_AGENT_SUCCESS])
            return bytes([SSH_AGENT_FAILURE])
        if message_type == SSH_AGENTC_LOCK:
            passphrase, _ = read_string(payload, 0)
            if self.locked or self.refuse_lock:
                return bytes([SSH_AGENT_FAILURE])
            self.locked = True
            self.passphrase = passphrase.decode()
            return bytes([SSH_AGENT_SUCCESS])
        return bytes([SSH_AGENT_FAILURE])

    def stop(self) -> None:
        self.client_sock.close()
        self._thread.join(timeout=5)


