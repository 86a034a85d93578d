"""
Client Selection Store

Holds the roster of clients visible to the signed-in user and which one
is currently selected.

DESIGN DECISION: State is an immutable value changed only by `reduce`
(a pure function of state and action). ClientStore wraps it with the
async effects (loading clients, resolving the selected client) and tells
subscribers about every change. Nothing here is global; callers create a
store and pass it where it is needed.

State machine:
    initial --SignedIn--> loading --ClientsLoaded--> ready
    ready --ClientSelected--> client id set --ClientResolved--> client set
    any --SignedOut--> initial

Failures are logged and recorded in `error`; the loading flag is cleared
and the roster stays as it was. A selection change stands even when the
selected client cannot be fetched (`current_client` stays None). Nothing
is retried.
"""

from enum import Enum
from typing import Callable, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field

from finplan.audit import AuditLogger
from finplan.models.base import EntityId
from finplan.models.client import Client
from finplan.services.repositories import ClientRepository
from finplan.services.storage import StorageError


logger = structlog.get_logger(__name__)


# =============================================================================
# STATE
# =============================================================================

class UserRole(str, Enum):
    ADVISOR = "advisor"
    CLIENT = "client"


class Viewer(BaseModel):
    """The signed-in user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole = UserRole.CLIENT

    @property
    def is_advisor(self) -> bool:
        return self.role == UserRole.ADVISOR


class ClientState(BaseModel):
    """Snapshot of the selection state. Never mutated; see `reduce`."""

    model_config = ConfigDict(frozen=True)

    viewer: Optional[Viewer] = None
    clients: tuple[Client, ...] = ()
    clients_loaded: bool = False
    current_client_id: Optional[EntityId] = None
    current_client: Optional[Client] = None
    loading: bool = False
    error: Optional[str] = None


# =============================================================================
# ACTIONS
# =============================================================================

class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class SignedIn(_Action):
    viewer: Viewer


class ClientsLoaded(_Action):
    clients: list[Client] = Field(default_factory=list)


class LoadFailed(_Action):
    error: str


class ClientSelected(_Action):
    client_id: Optional[EntityId] = None


class ClientResolved(_Action):
    client_id: EntityId
    client: Optional[Client] = None


class SignedOut(_Action):
    pass


Action = Union[SignedIn, ClientsLoaded, LoadFailed, ClientSelected, ClientResolved, SignedOut]


def reduce(state: ClientState, action: Action) -> ClientState:
    """
    Compute the next state.

    Returns `state` itself when the action changes nothing.
    """
    if isinstance(action, SignedIn):
        return ClientState(viewer=action.viewer, loading=True)

    if isinstance(action, SignedOut):
        return ClientState()

    if isinstance(action, ClientsLoaded):
        update = {
            "clients": tuple(action.clients),
            "clients_loaded": True,
            "loading": False,
            "error": None,
        }
        # A client user linked to exactly one client works on that client
        viewer = state.viewer
        if viewer is not None and not viewer.is_advisor and len(action.clients) == 1:
            only = action.clients[0]
            update["current_client_id"] = only.id
            update["current_client"] = only
        return state.model_copy(update=update)

    if isinstance(action, LoadFailed):
        return state.model_copy(update={"loading": False, "error": action.error})

    if isinstance(action, ClientSelected):
        if action.client_id == state.current_client_id:
            return state
        return state.model_copy(
            update={"current_client_id": action.client_id, "current_client": None}
        )

    if isinstance(action, ClientResolved):
        # Ignore answers for a selection that has since changed
        if action.client_id != state.current_client_id:
            return state
        return state.model_copy(update={"current_client": action.client})

    raise TypeError(f"Unknown action: {action!r}")


# =============================================================================
# STORE
# =============================================================================

Listener = Callable[[ClientState], None]


class ClientStore:
    """
    Selection state plus the effects that drive it.

    Usage:
        store = ClientStore(ClientRepository(backend))
        store.subscribe(lambda state: print(state.current_client))
        await store.sign_in(Viewer(user_id="u1", role=UserRole.CLIENT))
    """

    def __init__(
        self,
        clients: ClientRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._clients = clients
        self._audit = audit_logger or AuditLogger()
        self._state = ClientState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ClientState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> ClientState:
        new_state = reduce(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    async def sign_in(self, viewer: Viewer) -> ClientState:
        """Start a session for `viewer` and load their clients."""
        self.dispatch(SignedIn(viewer=viewer))
        return await self.refresh_clients()

    async def refresh_clients(self) -> ClientState:
        """Reload the client roster. Without a viewer the roster is empty."""
        if self._state.viewer is None:
            return self.dispatch(ClientsLoaded(clients=[]))

        try:
            clients = await self._clients.get_all()
        except StorageError as e:
            logger.error("client_refresh_failed", error=str(e))
            return self.dispatch(LoadFailed(error=str(e)))

        state = self.dispatch(ClientsLoaded(clients=clients))
        logger.info(
            "clients_loaded",
            count=len(clients),
            auto_selected=str(state.current_client_id) if state.current_client_id is not None else None,
        )
        return state

    async def select(self, client_id: Optional[EntityId]) -> ClientState:
        """Select a client (None clears the selection) and fetch its record."""
        self.dispatch(ClientSelected(client_id=client_id))
        await self._audit.log_client_selected(client_id)

        if client_id is None:
            return self._state

        try:
            client = await self._clients.get_by_id(client_id)
        except StorageError as e:
            logger.error("client_fetch_failed", client_id=str(client_id), error=str(e))
            return self.dispatch(LoadFailed(error=str(e)))

        return self.dispatch(ClientResolved(client_id=client_id, client=client))

    def sign_out(self) -> ClientState:
        return self.dispatch(SignedOut())
