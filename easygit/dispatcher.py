#!/usr/bin/env python3

import logging
from dataclasses import dataclass
from typing import Optional

import click
from rich.markup import escape

from .errors import MacroExecutionError, MacroNotFoundError
from .macros import MacroStore
from .operations import ExecutionContext, run_action

__all__ = [
    "MacroDispatcher",
    "MacroRun",
    "NOT_STARTED",
    "RUNNING",
    "COMPLETED",
    "FAILED",
]

log = logging.getLogger(__name__)

NOT_STARTED = "not-started"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class MacroRun:
    """Progress of one custom command execution."""

    name: str
    total: int
    state: str = NOT_STARTED
    index: int = 0  # position of the action being (or last) executed
    error: Optional[BaseException] = None


class MacroDispatcher:
    """Replays stored custom commands against a repository.

    Actions run strictly in order. The first action that raises stops the run;
    nothing already done is rolled back.
    """

    def __init__(self, context: ExecutionContext, store: MacroStore) -> None:
        self.context = context
        self.store = store

    async def execute(self, name: str) -> MacroRun:
        """Run the custom command called name.

        Args:
            name: Name of a stored custom command

        Returns:
            The finished run, in the completed state

        Raises:
            MacroNotFoundError: If no command has that name
            MacroExecutionError: If an action fails; its cause is chained
        """
        macro = self.store.find_by_name(name)
        if macro is None:
            raise MacroNotFoundError(name)

        ctx = self.context
        run = MacroRun(name=macro.name, total=len(macro.actions))
        ctx.console.print(
            f"\n[cyan]{escape(ctx.t('custom.running', name=macro.name))}[/cyan]"
        )
        if macro.description:
            ctx.console.print(
                f"   {macro.description}\n", style="dim", highlight=False, markup=False
            )

        run.state = RUNNING
        for index, action in enumerate(macro.actions):
            run.index = index
            log.info(
                "Custom command %s: step %d/%d (%s)",
                macro.name,
                index + 1,
                run.total,
                action.TYPE,
            )
            try:
                await run_action(ctx, action)
            except click.Abort:
                run.state = FAILED
                raise
            except Exception as e:
                run.state = FAILED
                run.error = e
                logging.error(
                    f"Custom command {macro.name} failed at step {index + 1}: {e!s}"
                )
                raise MacroExecutionError(macro.name, index, action.TYPE, e) from e

        run.state = COMPLETED
        ctx.console.print(
            f"\n[green]{escape(ctx.t('custom.completed', name=macro.name))}[/green]"
        )
        return run
