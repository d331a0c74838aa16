"""Carry open todos from earlier notes into today's note."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field

from .composer import insert_incomplete_todos, remove_empty_todos
from .deduper import filter_out_existing_todos
from .models import TodoForest, count_todos
from .parser import parse_text_for_todos
from .reconciler import calculate_remaining_incomplete_todos
from .remover import remove_incomplete_todos
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class CarryForwardResult:
    today_text: str
    # Only previous notes whose text changed, keyed like the input
    updated_previous: dict[Hashable, str] = field(default_factory=dict)
    num_incomplete: int = 0
    num_missing: int = 0
    incomplete_todos: TodoForest = field(default_factory=dict)
    missing_todos: TodoForest = field(default_factory=dict)


def carry_forward(
    previous_texts: Mapping[Hashable, str],
    today_text: str,
    settings: Settings,
) -> CarryForwardResult:
    """
    Merge todos still open in ``previous_texts`` into ``today_text``.

    ``previous_texts`` must iterate oldest note first; its keys are only used
    to label log lines and the returned updates.
    """
    allowed = settings.supported_todo_chars
    complete = settings.complete_todo_chars
    by_section = settings.group_by_section
    logger.debug(
        'Running with: supportedTodoChars: "%s", completeTodoChars: "%s"',
        "".join(sorted(allowed)),
        "".join(sorted(complete)),
    )

    previous_forests = []
    for name, text in previous_texts.items():
        forest = parse_text_for_todos(text, by_section, allowed, complete)
        logger.info("Todos for %s: %d top-level", name, count_todos(forest))
        for section, todos in forest.items():
            logger.debug("  Group: %s (%d)", section, len(todos))
        previous_forests.append(forest)

    incomplete = calculate_remaining_incomplete_todos(previous_forests)
    num_incomplete = count_todos(incomplete)
    logger.info("%d top-level incomplete todos found in previous days", num_incomplete)

    todays_forest = parse_text_for_todos(today_text, by_section, allowed, complete)
    missing = {
        section: todos
        for section, todos in filter_out_existing_todos(incomplete, todays_forest).items()
        if todos
    }
    num_missing = count_todos(missing)
    logger.info("Of previous todos, %d not found in today's note.", num_missing)

    new_today_text = today_text
    if num_missing > 0:
        new_today_text = insert_incomplete_todos(missing, by_section, new_today_text)
    if settings.remove_empty_todos:
        new_today_text = remove_empty_todos(new_today_text)

    updated_previous: dict[Hashable, str] = {}
    if settings.remove_incomplete_todos_from_previous_notes and num_incomplete > 0:
        for name, text in previous_texts.items():
            new_text = remove_incomplete_todos(text, incomplete, by_section, allowed, complete)
            if new_text != text:
                logger.info("Removed carried todos from %s", name)
                updated_previous[name] = new_text

    return CarryForwardResult(
        today_text=new_today_text,
        updated_previous=updated_previous,
        num_incomplete=num_incomplete,
        num_missing=num_missing,
        incomplete_todos=incomplete,
        missing_todos=missing,
    )
