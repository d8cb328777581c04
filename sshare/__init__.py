# sshare: share public SSH keys through curl-able links

from sshare.keys.agent import AgentKeys, KeyAgent
from sshare.keys.key import Key, render_authorized_keys
from sshare.stores.pastebin import ExpiryTime, Pastebin, Visibility
from sshare.stores.transfer import TransferSh

__all__ = [
    "AgentKeys",
    "ExpiryTime",
    "Key",
    "KeyAgent",
    "Pastebin",
    "TransferSh",
    "Visibility",
    "render_authorized_keys",
]
