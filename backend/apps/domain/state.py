# apps/domain/state.py

"""
Client State - Modal store and tag selection

Both pieces of state belong to a single browser session. They are never
shared and never written to the database.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class ModalType(str, Enum):
    """Dialogs the UI can open"""
    CREATE_FOLDER = "createFolder"
    RENAME_FOLDER = "renameFolder"
    DELETE_FOLDER = "deleteFolder"
    CREATE_PROMPT = "createPrompt"
    RENAME_PROMPT = "renamePrompt"
    MOVE_PROMPT = "movePrompt"
    DELETE_PROMPT = "deletePrompt"
    CREATE_TAG = "createTag"
    EDIT_TAG = "editTag"
    DELETE_TAG = "deleteTag"
    SAVE_VERSION = "saveVersion"


@dataclass(frozen=True)
class ModalState:
    """Which modal is open and with what payload"""
    type: Optional[ModalType] = None
    data: Dict[str, Any] = field(default_factory=dict)
    is_open: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value if self.type else None,
            'data': dict(self.data),
            'is_open': self.is_open,
        }

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "ModalState":
        if not raw or not raw.get('is_open'):
            return CLOSED
        try:
            modal_type = ModalType(raw.get('type'))
        except ValueError:
            logger.warning(f"Discarding modal state with unknown type: {raw.get('type')!r}")
            return CLOSED
        return cls(type=modal_type, data=dict(raw.get('data') or {}), is_open=True)


CLOSED = ModalState()


class ModalStore:
    """
    Single-writer container for modal state

    Exactly one modal can be open. `open` replaces whatever was open
    before; `close` resets type, payload and flag together.
    """

    def __init__(
        self,
        state: ModalState = CLOSED,
        on_change: Optional[Callable[[ModalState], None]] = None,
    ):
        self._state = state
        self._on_change = on_change

    @property
    def state(self) -> ModalState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    def open(self, modal_type, data: Optional[Dict[str, Any]] = None) -> ModalState:
        self._set(ModalState(type=ModalType(modal_type), data=dict(data or {}), is_open=True))
        return self._state

    def close(self) -> ModalState:
        self._set(CLOSED)
        return self._state

    def _set(self, state: ModalState) -> None:
        self._state = state
        if self._on_change:
            self._on_change(state)


# ============================================================
# TAG SELECTION
# ============================================================

SELECTED_TAG_KEY = "selectedTag"


@dataclass(frozen=True)
class SelectedTag:
    """The tag filter on the group-by-tags page; id None means all prompts"""
    id: Optional[str]
    name: str

    @property
    def is_all(self) -> bool:
        return self.id is None

    def dumps(self) -> str:
        return json.dumps(asdict(self), separators=(",", ":"))


ALL_PROMPTS = SelectedTag(id=None, name="All Prompts")


def parse_selected_tag(raw: Optional[str]) -> SelectedTag:
    """
    Restore a stored selection

    Missing values give the "All Prompts" default silently. Malformed JSON
    or a payload of the wrong shape is logged and gives the same default.
    """
    if not raw:
        return ALL_PROMPTS

    try:
        payload = json.loads(raw)
        tag_id = payload["id"]
        name = payload["name"]
        if tag_id is not None and not isinstance(tag_id, str):
            raise TypeError(f"id must be a string or null, got {type(tag_id).__name__}")
        if not isinstance(name, str):
            raise TypeError(f"name must be a string, got {type(name).__name__}")
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Error parsing saved {SELECTED_TAG_KEY}: {e}")
        return ALL_PROMPTS

    return SelectedTag(id=tag_id, name=name)
