from .event_hub import EventHub, Subscription
from .session_store import SessionStore, StatusReport

__all__ = ["SessionStore", "StatusReport", "EventHub", "Subscription"]
