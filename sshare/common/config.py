"""
Configuration settings for sshare.
"""

from __future__ import annotations

import logging
import os


class Config:
    """Central configuration class for all tool settings."""

    def __init__(self) -> None:
        # Remote stores
        self.TRANSFER_URL: str = os.getenv(
            "SSHARE_TRANSFER_URL", "https://transfer.sh"
        )
        self.PASTEBIN_URL: str = os.getenv(
            "SSHARE_PASTEBIN_URL", "https://pastebin.com"
        )
        self.PASTEBIN_DEV_TOKEN: str = os.getenv("SSHARE_PASTEBIN_TOKEN", "")
        self.GITHUB_API_URL: str = os.getenv(
            "SSHARE_GITHUB_API_URL", "https://api.github.com"
        )

        # Upload defaults
        self.DEFAULT_FILENAME: str = "authorized_keys"
        self.DEFAULT_MAX_DOWNLOADS: int = 10
        self.DEFAULT_MAX_DAYS: int = 2
        self.DEFAULT_EXPIRY: str = "1D"
        self.DEFAULT_VISIBILITY: str = "unlisted"

        # Agent
        self.SSH_AUTH_SOCK: str = os.getenv("SSH_AUTH_SOCK", "")

        # Timeouts in seconds
        self.HTTP_TIMEOUT: float = float(os.getenv("SSHARE_HTTP_TIMEOUT", "30"))
        self.AGENT_TIMEOUT: float = float(os.getenv("SSHARE_AGENT_TIMEOUT", "10"))
        self.MAX_AGENT_REPLY_LEN: int = 256 * 1024

        # Logging
        self.LOG_LEVEL: int = logging.WARNING
