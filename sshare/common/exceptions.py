"""
Custom exceptions for sshare.
"""

from __future__ import annotations


class SshareError(Exception):
    """Base exception for all sshare failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class KeyParseError(SshareError):
    """Exception for key text that is not a valid authorized key line."""


class AgentConnectionError(SshareError):
    """Exception for an unreachable SSH agent endpoint."""


class AgentError(SshareError):
    """Exception for a failed agent operation (unlock, listing)."""


class InvalidConfigError(SshareError):
    """Exception for invalid configuration values."""


class InvalidURLError(InvalidConfigError):
    """Exception for a base URL that is not http or https."""


class RemoteStoreError(SshareError):
    """Exception for failed remote store requests."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UploadError(RemoteStoreError):
    """Exception for a failed upload."""


class DeleteError(RemoteStoreError):
    """Exception for a failed deletion."""


class PostError(RemoteStoreError):
    """Exception for a failed paste creation."""


class AuthError(RemoteStoreError):
    """Exception for a failed credential exchange."""


class GitHubError(SshareError):
    """Exception for failures listing keys from a GitHub account."""


class SelectionError(SshareError):
    """Exception for a cancelled or empty key selection."""
