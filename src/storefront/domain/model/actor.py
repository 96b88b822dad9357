"""The acting identity behind a request.

Resolved once at the boundary (HTTP headers, CLI options); everything
below the boundary reads ``active_role`` and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    id: str
    active_role: Role

    @staticmethod
    def of(actor_id: str, role: str) -> Actor:
        if not actor_id or not actor_id.strip():
            raise ValidationError("Actor id is required")
        try:
            active_role = Role(role.strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown role: {role!r}") from exc
        return Actor(id=actor_id.strip(), active_role=active_role)
