"""
Shared CLI options — selection flags and exit codes.

``plan``, ``explain`` and ``run`` accept the same selection flags;
``selection_options`` adds them and ``criteria_from_options`` turns
the parsed values into a SelectionCriteria.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click
from pydantic import ValidationError

from acfs.core.models.selection import SelectionCriteria

EXIT_OK = 0
EXIT_EXECUTION_FAILED = 1
EXIT_PLANNING_FAILED = 2

_SELECTION_OPTIONS = (
    click.option("--only", "only", multiple=True, metavar="ID",
                 help="Install only these modules (repeatable, comma-separated)."),
    click.option("--only-phase", "only_phase", multiple=True, metavar="N",
                 help="Install only modules in these phases."),
    click.option("--skip", "skip", multiple=True, metavar="ID",
                 help="Never install these modules."),
    click.option("--skip-tag", "skip_tag", multiple=True, metavar="TAG",
                 help="Skip modules carrying this tag."),
    click.option("--skip-category", "skip_category", multiple=True, metavar="CAT",
                 help="Skip modules in this category."),
    click.option("--no-deps", "no_deps", is_flag=True,
                 help="Do not pull in dependencies (advanced; may break installs)."),
)


def selection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorate a command with every selection flag."""
    for option in reversed(_SELECTION_OPTIONS):
        func = option(func)
    return func


def criteria_from_options(
    only: tuple[str, ...],
    only_phase: tuple[str, ...],
    skip: tuple[str, ...],
    skip_tag: tuple[str, ...],
    skip_category: tuple[str, ...],
    no_deps: bool,
) -> SelectionCriteria:
    """Build SelectionCriteria from parsed flags.

    Raises:
        click.BadParameter: a value is blank, or a phase is not an integer.
    """
    try:
        return SelectionCriteria(
            only=only,
            only_phase=only_phase,
            skip=skip,
            skip_tag=skip_tag,
            skip_category=skip_category,
            no_deps=no_deps,
        )
    except ValidationError as e:
        error = e.errors()[0]
        option = str(error["loc"][0]).replace("_", "-")
        message = str(error["ctx"]["error"]) if "ctx" in error else error["msg"]
        raise click.BadParameter(message, param_hint=f"'--{option}'") from e
