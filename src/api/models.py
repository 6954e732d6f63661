"""Requests and Response models exchanged with the presentation layer"""

import string
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import MessageKind, Status
from src.puzzle.modes import MODES_BY_KEY

Letter = str
FeedbackName = str


# --- REQUEST MODELS ---
class LoadWordsRequest(BaseModel):
    """Raw lines handed over by the word-pool collaborator."""

    guess_words: list[str]
    answer_words: list[str]


class SwitchModeRequest(BaseModel):
    mode_key: str

    @field_validator("mode_key")
    @classmethod
    def validate_mode_key(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in MODES_BY_KEY:
            raise InvalidRequestError(
                f"Unknown mode {value!r}. Pick one from {','.join(MODES_BY_KEY)}"
            )
        return value


class CharRequest(BaseModel):
    char: str

    @field_validator("char")
    @classmethod
    def validate_char(cls, value: str) -> str:
        if len(value) != 1 or value not in string.ascii_letters:
            raise InvalidRequestError(f"Cannot interpret {value!r} as a single letter.")
        return value.lower()


class VisibilityRequest(BaseModel):
    hidden: bool


# --- RESPONSE MODELS ---
class TileView(BaseModel):
    letter: str
    state: str


class ModeButtonView(BaseModel):
    key: str
    label: str
    under_text: str
    active: bool


class MessageView(BaseModel):
    text: str = ""
    kind: MessageKind = MessageKind.INFO
    auto_fade: bool = False


class BoardView(BaseModel):
    board_id: str
    mode_key: str
    mode_label: str
    seed_key: str
    status: Status
    word_length: int
    guess_count: int
    time_text: str
    header_seed: str
    header_copy_text: str
    rows: list[list[TileView]]
    key_state: dict[Letter, FeedbackName]
    can_enter: bool
    can_clear: bool
    is_finished: bool


class SessionView(BaseModel):
    ready: bool
    board: Optional[BoardView] = None
    modes: list[ModeButtonView] = Field(default_factory=list)
    message: MessageView = Field(default_factory=MessageView)
