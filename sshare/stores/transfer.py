"""
transfer.sh style store: files are PUT with retention headers.
"""

from __future__ import annotations

import logging
import posixpath
from urllib.parse import urlparse

import requests

from sshare.common.config import Config
from sshare.common.exceptions import DeleteError, UploadError
from sshare.common.models import Publication, UploadConfig, UploadResult
from sshare.stores.base import join_url, validate_base_url

logger = logging.getLogger(__name__)


class TransferSh:
    """Client for a transfer.sh instance."""

    def __init__(
        self,
        base_url: str | None = None,
        upload_config: UploadConfig | None = None,
        timeout: float | None = None,
    ) -> None:
        config = Config()
        self.base_url = validate_base_url(base_url or config.TRANSFER_URL)
        self.upload_config = upload_config or UploadConfig(
            filename=config.DEFAULT_FILENAME,
            max_downloads=config.DEFAULT_MAX_DOWNLOADS,
            max_days=config.DEFAULT_MAX_DAYS,
        )
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def upload(self, config: UploadConfig, data: str) -> UploadResult:
        """Upload data as a new file.

        Args:
            config: File name, retention limits and optional encryption password
            data: Text to upload

        Returns:
            The download locator and the token needed to delete the file

        Raises:
            UploadError: If the request fails or the response lacks either URL
        """
        upload_url = join_url(self.base_url, config.filename)
        headers = {
            "Content-Type": "text/plain",
            "Max-Downloads": str(config.max_downloads),
            "Max-Days": str(config.max_days),
        }
        if config.password:
            headers["X-Encrypt-Password"] = config.password

        logger.info("Uploading %d bytes to %s", len(data), upload_url)
        try:
            r = requests.put(
                upload_url,
                data=data.encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            msg = f"failed to perform the upload request: {err}"
            raise UploadError(msg) from err

        if r.status_code != 200:  # noqa: PLR2004
            msg = f"failed to upload data to transfer.sh: status {r.status_code}"
            raise UploadError(msg, r.status_code)

        locator = r.text.strip()
        delete_url = r.headers.get("X-Url-Delete", "").strip()
        if not locator or not delete_url:
            msg = "failed to obtain all urls for the transfer.sh upload"
            raise UploadError(msg, r.status_code)

        credential = posixpath.basename(urlparse(delete_url).path.rstrip("/"))
        if not credential:
            msg = f"delete url {delete_url!r} carries no token"
            raise UploadError(msg, r.status_code)

        logger.debug("Upload stored at %s", locator)
        return UploadResult(locator=locator, delete_credential=credential)

    def delete(self, locator: str, credential: str) -> None:
        """Delete a previously uploaded file before it expires.

        Raises:
            DeleteError: If the request fails or is refused
        """
        delete_url = join_url(locator, credential)
        logger.info("Deleting %s", locator)
        try:
            r = requests.delete(delete_url, timeout=self.timeout)
        except requests.RequestException as err:
            msg = f"failed to perform the delete request: {err}"
            raise DeleteError(msg) from err
        if r.status_code != 200:  # noqa: PLR2004
            msg = f"failed to delete file from transfer.sh: status {r.status_code}"
            raise DeleteError(msg, r.status_code)

    def locate(self, result: UploadResult) -> str:
        return result.locator

    def publish(self, data: str) -> Publication:
        result = self.upload(self.upload_config, data)
        return Publication(
            locator=self.locate(result),
            raw_locator=result.locator,
            delete_credential=result.delete_credential,
        )
