"""
Pastebin API store: pastes are created through form posts.
"""

from __future__ import annotations

import logging
from enum import Enum
from urllib.parse import urlparse

import requests

from sshare.common.config import Config
from sshare.common.exceptions import AuthError, InvalidConfigError, PostError
from sshare.common.models import PasteConfig, Publication
from sshare.stores.base import join_url, validate_base_url

logger = logging.getLogger(__name__)

PASTE_FORMAT = "sshconfig"


class ExpiryTime(Enum):
    """How long a paste stays available."""

    NEVER = "N"
    TEN_MINUTES = "10M"
    ONE_HOUR = "1H"
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    TWO_WEEKS = "2W"
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    INVALID = ""

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> ExpiryTime:
        """Map a code or alias to an expiry; anything else gives INVALID."""
        for member in cls:
            if member is not cls.INVALID and member.value == text:
                return member
        return _EXPIRY_ALIASES.get(text, cls.INVALID)


_EXPIRY_ALIASES: dict[str, ExpiryTime] = {
    "never": ExpiryTime.NEVER,
    "10mins": ExpiryTime.TEN_MINUTES,
    "1hour": ExpiryTime.ONE_HOUR,
    "hour": ExpiryTime.ONE_HOUR,
    "1day": ExpiryTime.ONE_DAY,
    "day": ExpiryTime.ONE_DAY,
    "1week": ExpiryTime.ONE_WEEK,
    "week": ExpiryTime.ONE_WEEK,
    "2weeks": ExpiryTime.TWO_WEEKS,
    "1month": ExpiryTime.ONE_MONTH,
    "month": ExpiryTime.ONE_MONTH,
    "6months": ExpiryTime.SIX_MONTHS,
    "1year": ExpiryTime.ONE_YEAR,
    "year": ExpiryTime.ONE_YEAR,
}


class Visibility(Enum):
    """Who can find a paste."""

    PUBLIC = "0"
    UNLISTED = "1"
    PRIVATE = "2"
    INVALID = ""

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> Visibility:
        """Map a code or alias to a visibility; anything else gives INVALID."""
        for member in cls:
            if member is not cls.INVALID and member.value == text:
                return member
        return _VISIBILITY_ALIASES.get(text, cls.INVALID)


_VISIBILITY_ALIASES: dict[str, Visibility] = {
    "public": Visibility.PUBLIC,
    "pub": Visibility.PUBLIC,
    "unlisted": Visibility.UNLISTED,
    "private": Visibility.PRIVATE,
    "priv": Visibility.PRIVATE,
}


class Pastebin:
    """Client for the Pastebin API.

    A developer token is needed for every request. A user key ties pastes to
    an account (required for private pastes) and a folder key files them.
    """

    def __init__(
        self,
        config: PasteConfig,
        expiry: ExpiryTime = ExpiryTime.ONE_DAY,
        visibility: Visibility = Visibility.UNLISTED,
        timeout: float | None = None,
    ) -> None:
        if expiry is ExpiryTime.INVALID or visibility is Visibility.INVALID:
            msg = "paste expiry and visibility must be valid"
            raise InvalidConfigError(msg)
        self.base_url = validate_base_url(config.endpoint_base)
        self.dev_token = config.dev_token
        self.user_key = config.user_key or None
        self.folder_key = config.folder_key or None
        self.expiry = expiry
        self.visibility = visibility
        self.timeout = timeout if timeout is not None else Config().HTTP_TIMEOUT

    @classmethod
    def create(
        cls,
        dev_token: str,
        user_key: str | None = None,
        folder_key: str | None = None,
        endpoint_base: str | None = None,
        **kwargs: object,
    ) -> Pastebin:
        """Build a client from plain values.

        Raises:
            InvalidConfigError: If the developer token is empty
            InvalidURLError: If the endpoint is not an http(s) URL
        """
        config = PasteConfig(
            endpoint_base=endpoint_base or Config().PASTEBIN_URL,
            dev_token=dev_token,
            user_key=user_key,
            folder_key=folder_key,
        )
        return cls(config, **kwargs)  # type: ignore[arg-type]

    def generate_user_key(self, username: str, password: str) -> str:
        """Exchange account credentials for a user key that does not expire.

        Raises:
            AuthError: If the login is refused
        """
        login_url = join_url(self.base_url, "api", "api_login.php")
        form = {
            "api_dev_key": self.dev_token,
            "api_user_name": username,
            "api_user_password": password,
        }
        try:
            r = requests.post(login_url, data=form, timeout=self.timeout)
        except requests.RequestException as err:
            msg = f"login request failed: {err}"
            raise AuthError(msg) from err
        if r.status_code != 200:  # noqa: PLR2004
            msg = f"pastebin login failed: status {r.status_code}"
            raise AuthError(msg, r.status_code)
        if not r.text or r.text.startswith("Bad API request"):
            msg = f"pastebin login failed: {r.text or 'empty response'}"
            raise AuthError(msg, r.status_code)
        logger.debug("Obtained pastebin user key for %s", username)
        return r.text

    def post(self, paste: str, expiry: ExpiryTime, visibility: Visibility) -> str:
        """Create a new paste.

        Args:
            paste: Paste body
            expiry: Validated expiry, never INVALID
            visibility: Validated visibility, never INVALID

        Returns:
            The paste code

        Raises:
            InvalidConfigError: If either option is INVALID
            PostError: If the paste is refused or no paste URL comes back
        """
        if expiry is ExpiryTime.INVALID or visibility is Visibility.INVALID:
            msg = "paste expiry and visibility must be validated before posting"
            raise InvalidConfigError(msg)

        post_url = join_url(self.base_url, "api", "api_post.php")
        form = {
            "api_dev_key": self.dev_token,
            "api_option": "paste",
            "api_paste_format": PASTE_FORMAT,
            "api_paste_private": visibility.code,
            "api_paste_expire_date": expiry.code,
        }
        if self.user_key:
            form["api_user_key"] = self.user_key
        if self.folder_key:
            form["api_folder_key"] = self.folder_key
        form["api_paste_code"] = paste

        logger.info("Posting %d bytes to %s", len(paste), self.base_url)
        try:
            r = requests.post(post_url, data=form, timeout=self.timeout)
        except requests.RequestException as err:
            msg = f"new paste request failed: {err}"
            raise PostError(msg) from err
        if r.status_code != 200:  # noqa: PLR2004
            msg = f"pastebin new paste failed: status {r.status_code} ({r.text})"
            raise PostError(msg, r.status_code)

        paste_url = urlparse(r.text.strip())
        code = paste_url.path.lstrip("/")
        if paste_url.scheme not in ("http", "https") or not code:
            msg = f"no valid paste url was returned: {r.text.strip()!r}"
            raise PostError(msg, r.status_code)
        logger.debug("Paste created with code %s", code)
        return code

    def locator_url(self, code: str) -> str:
        return join_url(self.base_url, code)

    def raw_locator_url(self, code: str) -> str:
        return join_url(self.base_url, "raw", code)

    def publish(self, data: str) -> Publication:
        code = self.post(data, self.expiry, self.visibility)
        return Publication(
            locator=self.locator_url(code),
            raw_locator=self.raw_locator_url(code),
        )
