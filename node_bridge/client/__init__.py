"""
CMS-side half of the bridge: port discovery, proxying, event notification
and status checks against the companion Node service.
"""
from .bridge import BridgeClient
from .hooks import ActionHooks

__all__ = ["BridgeClient", "ActionHooks"]
