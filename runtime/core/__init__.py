"""
Core runtime module.

Exports:
- EventBus, Event, DialogueEvent, WorldEvent: Event system
- StateModel: Persisted state base
- RuntimeConfig, configure_logging: Configuration
"""

from runtime.core.events import EventBus, Event, DialogueEvent, WorldEvent
from runtime.core.component import StateModel
from runtime.core.config import RuntimeConfig, configure_logging

__all__ = [
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    "WorldEvent",
    # State
    "StateModel",
    # Config
    "RuntimeConfig",
    "configure_logging",
]
