"""Carry unfinished nested todos forward between daily notes."""

from .composer import insert_incomplete_todos, remove_empty_todos, todos_to_string
from .deduper import filter_out_existing_todos
from .models import UNTITLED_SECTION, TodoForest, TodoNode, count_todos
from .parser import parse_for_todos, parse_text_for_todos
from .pipeline import CarryForwardResult, carry_forward
from .reconciler import calculate_remaining_incomplete_todos, todo_has_incomplete_item
from .remover import remove_incomplete_todos
from .settings import Settings, SettingsError, load_settings, save_settings
