"""
Input records for thread analysis.

Messages arrive from whatever layer fetched them (API client, export
file, test fixture) as plain dicts. These pydantic models are the one
place where that input is validated; everything downstream works on
immutable Message objects.

Usage:
    from threadsense.models import coerce_messages

    messages = coerce_messages([{"ts": "1700000000.000100", "user": "U1", "text": "hi"}])
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Reaction(BaseModel):
    """An emoji reaction tally on a message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    count: int = Field(default=0, ge=0)


class Message(BaseModel):
    """
    One message of a thread.

    `ts` is kept as text: it may be fractional ("1700000000.000100") or
    garbage, and timeline code decides what to do with unparseable values.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    ts: str = ""
    user: str | None = None
    text: str | None = None
    reactions: tuple[Reaction, ...] = ()
    reply_count: int = Field(default=0, ge=0)

    @field_validator("ts", mode="before")
    @classmethod
    def _stringify_ts(cls, value: Any) -> Any:
        # JSON exports sometimes carry numeric timestamps
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return repr(value) if isinstance(value, float) else str(value)
        if value is None:
            return ""
        return value

    @field_validator("reactions", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return () if value is None else value


class ConversationThread(BaseModel):
    """A root message plus replies, identified by the root timestamp."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    thread_ts: str
    messages: tuple[Message, ...] = ()

    @field_validator("thread_ts", mode="before")
    @classmethod
    def _stringify_thread_ts(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return repr(value) if isinstance(value, float) else str(value)
        return value

    @property
    def participants(self) -> set[str]:
        return {m.user for m in self.messages if m.user}


def coerce_messages(records: Iterable[Message | Mapping[str, Any]]) -> list[Message]:
    """
    Turn raw records into Message objects, preserving order.

    Raises:
        pydantic.ValidationError: If a record has fields of the wrong type.
    """
    return [r if isinstance(r, Message) else Message.model_validate(r) for r in records]


def coerce_threads(
    records: Iterable[ConversationThread | Mapping[str, Any]],
) -> list[ConversationThread]:
    """Turn raw {thread_ts, messages} records into ConversationThread objects."""
    return [
        r if isinstance(r, ConversationThread) else ConversationThread.model_validate(r)
        for r in records
    ]
