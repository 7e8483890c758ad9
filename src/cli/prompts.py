"""Interactive prompts (questionary) and the reusable 0/1/many selector.

`unsafe_ask()` is used throughout so Ctrl-C raises `KeyboardInterrupt` and
ends the command instead of returning None as an answer.
"""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

import questionary

T = TypeVar("T")
V = TypeVar("V")


def confirm(message: str, default: bool = False) -> bool:
    return bool(questionary.confirm(message, default=default).unsafe_ask())


def text(message: str) -> str:
    return (questionary.text(message).unsafe_ask() or "").strip()


def search(message: str, choices: Sequence[tuple[str, V]], default: V | None = None) -> V:
    """Pick one of `choices` (label, value); typing filters labels by substring."""

    values = [value for _, value in choices]
    return questionary.select(
        message,
        choices=[questionary.Choice(title=label, value=value) for label, value in choices],
        default=default if default in values else None,
        use_search_filter=True,
        use_jk_keys=False,
    ).unsafe_ask()


def select_one(
    items: Sequence[T] | None,
    *,
    label_of: Callable[[T], str],
    value_of: Callable[[T], V],
    previous_default: V | None,
    message: str,
    announce_single: Callable[[T], str],
    say: Callable[[str], None],
) -> V | None:
    """Resolve one value out of `items`.

    - no items: None, the caller decides what that means
    - one item: announced and returned without prompting
    - more: filterable search list, `previous_default` pre-selected
    """

    if not items:
        return None

    if len(items) == 1:
        say(announce_single(items[0]))
        return value_of(items[0])

    choices = [(label_of(item), value_of(item)) for item in items]
    return search(message, choices, default=previous_default)
