"""Click base classes for simpledoc commands.

Any command or group can carry an ``examples`` block, shown on demand
with ``--examples`` so ``--help`` stays short. Under the root ``--json``
flag a subcommand's examples come back as a JSON document, which lets a
script discover invocations the same way it reads results.
"""

from __future__ import annotations

import json
import textwrap
from typing import Any

import click


class ExamplesMixin:
    """Adds an eager ``--examples`` flag when ``examples`` is given."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        lines = self.examples.splitlines()
        # Root params are parsed before any subcommand, so --json is known here.
        if ctx.find_root().params.get("json_output"):
            payload = {"command": ctx.command_path, "examples": lines}
            click.echo(json.dumps(payload, indent=2))
        else:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            for line in lines:
                click.echo(f"  {line}")
        ctx.exit(0)


class SimpleDocCommand(ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class SimpleDocGroup(ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`SimpleDocCommand`."""

    command_class = SimpleDocCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
