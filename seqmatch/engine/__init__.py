"""
SEQMATCH Engine — Registry, dispatch driver and host integration.

Core Components:
- SequenceEngine: Feeds events to live sequences and dispatches reactions
- SequenceRegistry: Live registrations with their buffers
- Reaction / template: What gets dispatched on completion
- SequenceMiddleware / SequenceDispatcher: Synchronous dispatch integration
- EngineSnapshot: Inspection model
"""

from .engine import SequenceEngine
from .middleware import SequenceDispatcher, SequenceMiddleware, thunk_middleware
from .reactions import Reaction, resolve_reaction, template
from .registry import Registration, SequenceRegistry, UnregisterHandle
from .snapshots import EngineSnapshot, RegistrationSnapshot

__all__ = [
    "SequenceEngine",
    "SequenceDispatcher",
    "SequenceMiddleware",
    "thunk_middleware",
    "Reaction",
    "resolve_reaction",
    "template",
    "Registration",
    "SequenceRegistry",
    "UnregisterHandle",
    "EngineSnapshot",
    "RegistrationSnapshot",
]
