"""Conversion of domain errors into CLI failures."""

from __future__ import annotations

import click

from ldms.domain.exceptions import DomainException


def fail(exc: DomainException) -> click.ClickException:
    """Build a ClickException carrying the HTTP-equivalent status."""
    return click.ClickException(f"[{exc.http_status}] {exc}")
