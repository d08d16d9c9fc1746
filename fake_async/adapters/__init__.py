"""Primitive strategies: the real event loop and the virtual scheduler."""

from fake_async.adapters.event_loop_primitives import EventLoopPrimitives
from fake_async.adapters.virtual_primitives import VirtualPrimitives

__all__ = [
    "EventLoopPrimitives",
    "VirtualPrimitives",
]
