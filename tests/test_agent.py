from __future__ import annotations

import socket
from pathlib import Path

import pytest
from helpers import (
    ECDSA_LINE,
    ED25519_FINGERPRINT,
    ED25519_LINE,
    RSA_LINE,
    certificate_line,
)

from sshare.common.exceptions import AgentConnectionError, AgentError
from sshare.keys.agent import (
    SSH_AGENTC_LOCK,
    SSH_AGENTC_REQUEST_IDENTITIES,
    SSH_AGENTC_UNLOCK,
    KeyAgent,
)
from sshare.keys.key import Key
from sshare.keys.wire import pack_string


def test_list_keys_without_passphrase(fake_agent_factory) -> None:
    """Keys come back in agent order, named by their comments."""
    fake = fake_agent_factory([ED25519_LINE, RSA_LINE])
    with KeyAgent(fake.client_sock) as agent:
        listed = agent.list_keys()

    assert [k.raw for k in listed] == [ED25519_LINE, RSA_LINE]
    assert [k.name for k in listed] == ["ed25519@example", "rsa@example"]
    assert listed.keys[0].fingerprint == ED25519_FINGERPRINT
    assert listed.warning is None
    assert fake.requests == [SSH_AGENTC_REQUEST_IDENTITIES]


def test_list_keys_empty_agent(fake_agent_factory) -> None:
    fake = fake_agent_factory([])
    with KeyAgent(fake.client_sock) as agent:
        listed = agent.list_keys()
    assert len(listed) == 0


def test_identity_without_comment(fake_agent_factory) -> None:
    line = " ".join(ECDSA_LINE.split()[:2])
    fake = fake_agent_factory([line])
    with KeyAgent(fake.client_sock) as agent:
        (key,) = agent.list_keys()
    assert key.raw == line
    assert key.name == ""


def test_certificate_identity_is_listed(fake_agent_factory) -> None:
    cert = certificate_line()
    fake = fake_agent_factory([cert, RSA_LINE])
    with KeyAgent(fake.client_sock) as agent:
        listed = agent.list_keys()

    assert [k.raw for k in listed] == [cert, RSA_LINE]
    assert listed.keys[0].key_type == "ssh-ed25519-cert-v01@openssh.com"
    assert listed.keys[0].name == "alice@laptop"
    assert listed.keys[0].fingerprint == ED25519_FINGERPRINT


def test_locked_agent_unlocked_and_relocked(fake_agent_factory) -> None:
    """The agent is bridged around a single listing and left locked."""
    fake = fake_agent_factory([ED25519_LINE, ECDSA_LINE], "X", locked=True)
    with KeyAgent(fake.client_sock, passphrase="X") as agent:
        listed = agent.list_keys()

    assert [k.raw for k in listed] == [ED25519_LINE, ECDSA_LINE]
    assert listed.warning is None
    assert not listed.relock_failed
    assert fake.locked
    assert fake.requests == [
        SSH_AGENTC_UNLOCK,
        SSH_AGENTC_REQUEST_IDENTITIES,
        SSH_AGENTC_LOCK,
    ]


def test_wrong_passphrase_fails_without_listing(fake_agent_factory) -> None:
    fake = fake_agent_factory([ED25519_LINE], "X", locked=True)
    with KeyAgent(fake.client_sock) as agent:
        agent.with_passphrase("wrong")
        with pytest.raises(AgentError, match="unlock"):
            agent.list_keys()

    assert fake.requests == [SSH_AGENTC_UNLOCK]
    assert fake.locked


def test_relock_failure_is_a_warning(fake_agent_factory, caplog) -> None:
    fake = fake_agent_factory([ED25519_LINE], "X", locked=True, refuse_lock=True)
    with KeyAgent(fake.client_sock, passphrase="X") as agent:
        listed = agent.list_keys()

    assert [k.raw for k in listed] == [ED25519_LINE]
    assert listed.relock_failed
    assert "lock" in listed.warning
    assert "could not be re-locked" in caplog.text
    assert not fake.locked


def test_unparsable_identity_aborts_listing(fake_agent_factory) -> None:
    """One bad identity fails the whole list."""
    good = Key.parse(ED25519_LINE)
    bad_blob = pack_string(b"ssh-ed25519") + pack_string(b"\x00" * 5)
    fake = fake_agent_factory(
        [],
        raw_identities=[(good.blob, b"good"), (bad_blob, b"bad")],
    )
    with KeyAgent(fake.client_sock) as agent, pytest.raises(AgentError, match="parse"):
        agent.list_keys()


def test_malformed_reply_is_agent_error() -> None:
    client, server = socket.socketpair()
    with server:
        # identities answer claiming one key but carrying none
        server.sendall(b"\x00\x00\x00\x05\x0c\x00\x00\x00\x01")
        with KeyAgent(client) as agent, pytest.raises(AgentError, match="malformed"):
            agent.list_keys()


def test_closed_connection_is_agent_error() -> None:
    client, server = socket.socketpair()
    server.close()
    with KeyAgent(client) as agent, pytest.raises(AgentError):
        agent.list_keys()


def test_connect_missing_socket(tmp_path: Path) -> None:
    with pytest.raises(AgentConnectionError):
        KeyAgent.connect(str(tmp_path / "nope.sock"))


def test_connect_requires_path() -> None:
    with pytest.raises(AgentConnectionError):
        KeyAgent.connect("")
