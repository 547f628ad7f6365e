# apps/web/modals.py
"""
Session-backed modal store

Wraps the domain ModalStore so the open dialog survives the redirect
after a form post. State lives in the user's own session only.
"""
import logging

from apps.domain.state import ModalState, ModalStore

logger = logging.getLogger(__name__)

SESSION_KEY = "modal"


class SessionModalStore(ModalStore):
    """ModalStore that writes every change to request.session"""

    def __init__(self, session):
        self._session = session
        super().__init__(
            state=ModalState.from_dict(session.get(SESSION_KEY)),
            on_change=self._persist,
        )

    def _persist(self, state: ModalState) -> None:
        if state.is_open:
            self._session[SESSION_KEY] = state.to_dict()
            logger.debug(f"Opened modal {state.type.value}")
        else:
            self._session.pop(SESSION_KEY, None)
            logger.debug("Closed modal")


def modal_store(request) -> SessionModalStore:
    """The modal store for this request, created once per request"""
    store = getattr(request, "_modal_store", None)
    if store is None:
        store = SessionModalStore(request.session)
        request._modal_store = store
    return store
