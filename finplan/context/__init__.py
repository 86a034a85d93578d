"""Client selection state."""

from finplan.context.store import (
    Action,
    ClientResolved,
    ClientSelected,
    ClientsLoaded,
    ClientState,
    ClientStore,
    LoadFailed,
    SignedIn,
    SignedOut,
    UserRole,
    Viewer,
    reduce,
)

__all__ = [
    "Action",
    "ClientResolved",
    "ClientSelected",
    "ClientsLoaded",
    "ClientState",
    "ClientStore",
    "LoadFailed",
    "SignedIn",
    "SignedOut",
    "UserRole",
    "Viewer",
    "reduce",
]
