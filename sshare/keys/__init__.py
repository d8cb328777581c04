from sshare.keys.agent import AgentKeys as AgentKeys
from sshare.keys.agent import KeyAgent as KeyAgent
from sshare.keys.key import Key as Key
from sshare.keys.key import render_authorized_keys as render_authorized_keys

__all__ = ["AgentKeys", "Key", "KeyAgent", "render_authorized_keys"]
