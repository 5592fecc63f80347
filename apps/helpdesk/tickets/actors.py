from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Roles a helpdesk account can hold. Every account holds exactly one."""

    ENDUSER = "enduser"
    AGENT = "agent"
    ADMINISTRATOR = "administrator"


@dataclass(frozen=True, slots=True)
class Actor:
    """Identity performing an operation, resolved once per request."""

    id: str
    role: Role

    @property
    def is_enduser(self) -> bool:
        return self.role is Role.ENDUSER

    @property
    def is_agent(self) -> bool:
        return self.role is Role.AGENT

    @property
    def is_administrator(self) -> bool:
        return self.role is Role.ADMINISTRATOR

    @property
    def is_staff(self) -> bool:
        """Agents and administrators see internal comments."""

        return self.role in (Role.AGENT, Role.ADMINISTRATOR)

    def has_role(self, role: Role) -> bool:
        return self.role is role
