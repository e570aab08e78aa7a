"""Store factory: classification, root state, derived cells, actions, assembly.

Architecture:
- classify: splits a description into base, derived and action entries
- RootState: one composite cell for all base fields
- StoreContext: the receiver getters and actions see as ``self``
- create_atomic_store: builds the AtomicStore mapping of cell handles
"""

from .actions import Patch
from .classifier import Classification, PropertyKind, classify
from .receiver import StoreContext
from .root import BaseStateRecord, RootState
from .store import AtomicStore, create_atomic_store

__all__ = [
    "AtomicStore",
    "BaseStateRecord",
    "Classification",
    "Patch",
    "PropertyKind",
    "RootState",
    "StoreContext",
    "classify",
    "create_atomic_store",
]
