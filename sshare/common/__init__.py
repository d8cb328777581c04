# Common utilities
from sshare.common.config import Config as Config
from sshare.common.logging_utils import setup_logger as setup_logger

__all__ = ["Config", "setup_logger"]
