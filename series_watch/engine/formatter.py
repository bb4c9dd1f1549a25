"""Plain-text reports for Slack."""

from __future__ import annotations

from typing import Iterable

from ..config import MessageConfig
from .models import Delta, Entity


def _entity_line(entity: Entity) -> str:
    return f"* <{entity.url}|{entity.title}>"


def _section(heading: str, entities: Iterable[Entity]) -> list[str]:
    return [heading, *(_entity_line(entity) for entity in entities)]


def format_delta(delta: Delta, messages: MessageConfig | None = None) -> str:
    """Render added and removed entities; empty sections are omitted."""

    messages = messages or MessageConfig()
    lines = [messages.header, ""]
    if delta.added:
        lines.extend(_section(messages.added_heading, delta.added))
        lines.append("")
    if delta.removed:
        lines.extend(_section(messages.removed_heading, delta.removed))
    return "\n".join(lines).rstrip("\n") + "\n"


def format_error(error: BaseException, messages: MessageConfig | None = None) -> str:
    messages = messages or MessageConfig()
    return f"{messages.error_heading}\n```{error}```"


__all__ = ["format_delta", "format_error"]
