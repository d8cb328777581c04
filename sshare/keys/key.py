"""
SSH public keys in the authorized_keys format.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from sshare.common.exceptions import KeyParseError
from sshare.keys.wire import WireFormatError, read_string

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

logger = logging.getLogger(__name__)

KEY_TYPES: frozenset[str] = frozenset(
    {
        "ssh-rsa",
        "ssh-dss",
        "ssh-ed25519",
        "ecdsa-sha2-nistp256",
        "ecdsa-sha2-nistp384",
        "ecdsa-sha2-nistp521",
        "sk-ssh-ed25519@openssh.com",
        "sk-ecdsa-sha2-nistp256@openssh.com",
    }
)

CERT_TYPES: frozenset[str] = frozenset(
    {
        "ssh-rsa-cert-v01@openssh.com",
        "ssh-dss-cert-v01@openssh.com",
        "ssh-ed25519-cert-v01@openssh.com",
        "ecdsa-sha2-nistp256-cert-v01@openssh.com",
        "ecdsa-sha2-nistp384-cert-v01@openssh.com",
        "ecdsa-sha2-nistp521-cert-v01@openssh.com",
    }
)

# Security key types carry an application string after the public point and
# are not understood by cryptography's OpenSSH loader.
_SK_FIELDS: dict[str, int] = {
    "sk-ssh-ed25519@openssh.com": 2,
    "sk-ecdsa-sha2-nistp256@openssh.com": 3,
}


def _split_options(line: str) -> str:
    """Drop a leading authorized_keys options field, honouring quotes."""
    fields = line.split(None, 2)
    if fields[0] in KEY_TYPES or fields[0] in CERT_TYPES:
        return line
    # Encoded key material always starts with the length of the type string,
    # so a token followed by "AAAA..." is a (possibly unknown) type tag.
    if len(fields) > 1 and fields[1].startswith("AAAA") and '"' not in fields[0]:
        return line
    in_quotes = False
    escaped = False
    for idx, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char in " \t" and not in_quotes:
            return line[idx:].lstrip()
    msg = "could not parse key as a valid authorized key: no key material after options"
    raise KeyParseError(msg)


def _check_sk_blob(key_type: str, blob: bytes) -> None:
    offset = 0
    try:
        _, offset = read_string(blob, offset)
        for _ in range(_SK_FIELDS[key_type]):
            _, offset = read_string(blob, offset)
    except WireFormatError as err:
        msg = f"invalid {key_type} key material: {err}"
        raise KeyParseError(msg) from err
    if offset != len(blob):
        msg = f"invalid {key_type} key material: trailing data"
        raise KeyParseError(msg)


class Key:
    """An SSH public key that is known to be a valid authorized key line."""

    __slots__ = ("_blob", "_certificate", "_key_type", "_name", "_public_key", "_raw")

    def __init__(
        self,
        raw: str,
        name: str,
        key_type: str,
        blob: bytes,
        public_key: PublicKeyTypes | None,
        certificate: serialization.SSHCertificate | None = None,
    ) -> None:
        self._raw = raw
        self._name = name
        self._key_type = key_type
        self._blob = blob
        self._public_key = public_key
        self._certificate = certificate

    @classmethod
    def parse(cls, raw: str, name: str = "") -> Key:
        """Parse a single authorized_keys line.

        Args:
            raw: The key line, optionally prefixed with options and followed
                by a comment
            name: Display name for the key; the key comment is used if empty

        Returns:
            The parsed key

        Raises:
            KeyParseError: If the line is not a valid authorized key
        """
        line = raw.strip()
        if not line:
            msg = "could not parse key as a valid authorized key: empty input"
            raise KeyParseError(msg)
        if "\n" in line or "\r" in line:
            msg = "could not parse key as a valid authorized key: more than one line"
            raise KeyParseError(msg)
        if line.startswith("#"):
            msg = "could not parse key as a valid authorized key: line is a comment"
            raise KeyParseError(msg)

        fields = _split_options(line).split(None, 2)
        key_type = fields[0]
        if key_type not in KEY_TYPES and key_type not in CERT_TYPES:
            msg = f"could not parse key as a valid authorized key: unknown key type {key_type!r}"
            raise KeyParseError(msg)
        if len(fields) < 2:  # noqa: PLR2004
            msg = "could not parse key as a valid authorized key: missing key material"
            raise KeyParseError(msg)
        encoded = fields[1]
        comment = fields[2].strip() if len(fields) > 2 else ""  # noqa: PLR2004

        try:
            blob = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as err:
            msg = f"could not parse key as a valid authorized key: bad base64: {err}"
            raise KeyParseError(msg) from err

        try:
            embedded_type, _ = read_string(blob, 0)
        except WireFormatError as err:
            msg = f"could not parse key as a valid authorized key: {err}"
            raise KeyParseError(msg) from err
        if embedded_type != key_type.encode():
            msg = (
                "could not parse key as a valid authorized key: "
                f"key type {key_type!r} does not match key material"
            )
            raise KeyParseError(msg)

        public_key: PublicKeyTypes | None = None
        certificate: serialization.SSHCertificate | None = None
        if key_type in _SK_FIELDS:
            _check_sk_blob(key_type, blob)
        elif key_type in CERT_TYPES:
            try:
                certificate = serialization.load_ssh_public_identity(
                    f"{key_type} {encoded}".encode()
                )
            except (ValueError, UnsupportedAlgorithm) as err:
                msg = f"could not parse key as a valid authorized key: {err}"
                raise KeyParseError(msg) from err
            public_key = certificate.public_key()
        else:
            try:
                public_key = serialization.load_ssh_public_key(
                    f"{key_type} {encoded}".encode()
                )
            except (ValueError, UnsupportedAlgorithm) as err:
                msg = f"could not parse key as a valid authorized key: {err}"
                raise KeyParseError(msg) from err

        return cls(
            raw=line,
            name=name or comment,
            key_type=key_type,
            blob=blob,
            public_key=public_key,
            certificate=certificate,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> Key:
        """Parse the trimmed contents of a public key file."""
        key_path = Path(path)
        logger.debug("Reading key file %s", key_path)
        contents = key_path.read_text(encoding="utf-8")
        return cls.parse(contents.strip())

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def name(self) -> str:
        return self._name

    @property
    def key_type(self) -> str:
        return self._key_type

    @property
    def blob(self) -> bytes:
        return self._blob

    @property
    def public_key(self) -> PublicKeyTypes | None:
        return self._public_key

    @property
    def certificate(self) -> serialization.SSHCertificate | None:
        """The OpenSSH certificate, for ``*-cert-v01@openssh.com`` keys."""
        return self._certificate

    @property
    def fingerprint(self) -> str:
        """SHA256 fingerprint in the form printed by ssh-keygen -l.

        Certificates are fingerprinted by the public key they certify, so a
        certificate and its plain key share a fingerprint.
        """
        blob = self._blob
        if self._certificate is not None:
            encoded = self._certificate.public_key().public_bytes(
                serialization.Encoding.OpenSSH, serialization.PublicFormat.OpenSSH
            )
            blob = base64.b64decode(encoded.split()[1])
        digest = hashlib.sha256(blob).digest()
        return "SHA256:" + base64.b64encode(digest).decode().rstrip("=")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._blob == other._blob

    def __hash__(self) -> int:
        return hash(self._blob)

    def __repr__(self) -> str:
        return f"Key(type={self._key_type!r}, name={self._name!r}, fingerprint={self.fingerprint!r})"


def render_authorized_keys(keys: Iterable[Key]) -> str:
    """Join keys into an authorized_keys body, one line per key."""
    return "".join(f"{key.raw}\n" for key in keys)
