#!/usr/bin/env python3

"""Interactive prompts built on click.

Every prompt that takes a validator keeps asking until the answer passes, so
callers never see an invalid value.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import click
from rich.console import Console
from rich.markup import escape

from .locale import LocaleService

__all__ = [
    "Choice",
    "Prompter",
    "normalize_choices",
    "parse_selection",
]

# A bare string is used as both label and value
Choice = Union[str, Tuple[str, Any]]

Validator = Callable[[str], Optional[str]]


def normalize_choices(choices: Sequence[Choice]) -> List[Tuple[str, Any]]:
    return [(c, c) if isinstance(c, str) else (c[0], c[1]) for c in choices]


def parse_selection(answer: str, count: int) -> Optional[List[int]]:
    """Parse a checkbox answer such as ``1,3`` or ``a`` into zero-based indexes.

    Returns:
        The sorted, de-duplicated indexes, or None if the answer is malformed
    """
    answer = answer.strip().lower()
    if answer in ("a", "all"):
        return list(range(count))
    if not answer:
        return []
    indexes = set()
    for part in answer.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit():
            return None
        number = int(part)
        if not 1 <= number <= count:
            return None
        indexes.add(number - 1)
    return sorted(indexes)


class Prompter:
    """Asks the user questions on the terminal."""

    def __init__(self, console: Console, locale: LocaleService) -> None:
        self.console = console
        self.locale = locale

    def _error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def text(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Validator] = None,
    ) -> str:
        """Ask for a line of text.

        Args:
            message: The question
            default: Returned when the user just presses enter; None makes an
                answer mandatory
            validate: Returns an error message for unacceptable answers
        """
        while True:
            answer = click.prompt(
                message,
                default=default,
                show_default=bool(default),
                type=str,
            )
            error = validate(answer) if validate else None
            if error is None:
                return answer
            self._error(error)

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def select(self, message: str, choices: Sequence[Choice], default: int = 0) -> Any:
        """Show a numbered list and return the value of the chosen entry."""
        options = normalize_choices(choices)
        if not options:
            raise ValueError("select() needs at least one choice")
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for number, (label, _) in enumerate(options, start=1):
            self.console.print(f"  {number}. {label}", highlight=False, markup=False)
        number = click.prompt(
            self.locale.t("input.choose"),
            type=click.IntRange(1, len(options)),
            default=default + 1,
        )
        return options[number - 1][1]

    def checkbox(
        self, message: str, choices: Sequence[Choice], min_count: int = 0
    ) -> List[Any]:
        """Let the user pick several entries; returns their values in list order."""
        options = normalize_choices(choices)
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for number, (label, _) in enumerate(options, start=1):
            self.console.print(f"  {number}. {label}", highlight=False, markup=False)
        while True:
            answer = click.prompt(
                self.locale.t("input.checkbox_hint"),
                default="",
                show_default=False,
                type=str,
            )
            indexes = parse_selection(answer, len(options))
            if indexes is None:
                self._error(self.locale.t("input.invalid_choice"))
                continue
            if len(indexes) < min_count:
                self._error(self.locale.t("input.min_selection", count=min_count))
                continue
            return [options[i][1] for i in indexes]

    def number(self, message: str, default: int, min_value: int = 0) -> int:
        return click.prompt(message, type=click.IntRange(min=min_value), default=default)
