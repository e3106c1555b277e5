from .event_router import (
    ActionCategory,
    BackgroundEventDispatcher,
    ChannelEvent,
    ChannelEventType,
    EventRouter,
    QueueEventRouter,
    get_event_router,
    set_event_router,
)

__all__ = [
    "ActionCategory",
    "BackgroundEventDispatcher",
    "ChannelEvent",
    "ChannelEventType",
    "EventRouter",
    "QueueEventRouter",
    "get_event_router",
    "set_event_router",
]
