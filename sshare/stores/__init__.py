"""
Remote stores that publish authorized_keys text.
"""

from sshare.stores.pastebin import ExpiryTime, Pastebin, Visibility
from sshare.stores.transfer import TransferSh

__all__ = ["ExpiryTime", "Pastebin", "TransferSh", "Visibility"]
