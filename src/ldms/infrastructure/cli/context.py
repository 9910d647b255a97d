"""Per-command access to the wired container.

The group callback only reads settings; the store is opened when a
command actually runs, so ``--help`` and usage errors never touch it.
"""

from __future__ import annotations

from functools import update_wrapper

import click

from ldms.domain.exceptions import DomainException
from ldms.infrastructure import bootstrap
from ldms.infrastructure.cli.errors import fail
from ldms.infrastructure.config import Settings


def pass_container(f):
    """Like ``click.pass_obj``, but hands the command a built Container."""

    def new_func(*args, **kwargs):
        ctx = click.get_current_context()
        settings = ctx.find_object(Settings)
        try:
            container = bootstrap.build(settings)
        except DomainException as exc:
            raise fail(exc) from exc
        return f(container, *args, **kwargs)

    return update_wrapper(new_func, f)
