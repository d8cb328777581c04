"""
Share every key held by the running SSH agent through transfer.sh.

This example lists the agent's keys, uploads them as an authorized_keys file
that can be downloaded once within a day, and prints the download and delete
links.
"""

import logging
import os
import sys
from pathlib import Path

# Add the project root to the path to import sshare
sys.path.insert(0, str(Path(__file__).parent.parent))

from sshare import KeyAgent, TransferSh, render_authorized_keys
from sshare.common.exceptions import SshareError
from sshare.common.models import UploadConfig


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        with KeyAgent.connect(
            os.environ["SSH_AUTH_SOCK"],
            passphrase=os.getenv("AGENT_PASSPHRASE"),
        ) as agent:
            listed = agent.list_keys()
        if listed.warning:
            logger.warning("Agent left unlocked: %s", listed.warning)

        for key in listed:
            logger.info("Sharing %s (%s)", key.name, key.fingerprint)

        config = UploadConfig().with_max_downloads(1).with_max_days(1)
        result = TransferSh().upload(config, render_authorized_keys(listed))
        logger.info("Download: curl %s", result.locator)
        logger.info("Delete:   curl -X DELETE %s", result.delete_url)
    except (KeyError, SshareError):
        logger.exception("Error")
        sys.exit(1)


if __name__ == "__main__":
    main()
