"""Options shared by every command that acts on someone's behalf."""

from __future__ import annotations

import functools

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor, Role


def actor_options(func):
    """Add ``--actor``/``--role`` and pass the resolved Actor as ``actor``."""

    @click.option("--actor", "actor_id", required=True, help="Acting user ID.")
    @click.option(
        "--role",
        type=click.Choice([r.value for r in Role]),
        default=Role.BUYER.value,
        show_default=True,
        help="Active role of the acting user.",
    )
    @functools.wraps(func)
    def wrapper(actor_id: str, role: str, **kwargs):
        try:
            actor = Actor.of(actor_id, role)
        except DomainException as exc:
            raise click.ClickException(str(exc))
        return func(actor=actor, **kwargs)

    return wrapper
