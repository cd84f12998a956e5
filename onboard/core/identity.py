# (c) Copyright Datacraft, 2026
"""Acting user passed explicitly to every mutating operation."""
from dataclasses import dataclass
from enum import Enum


class ActorRole(str, Enum):
	CUSTOMER = "customer"
	STAFF = "staff"
	SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class Actor:
	id: str
	role: ActorRole

	@property
	def is_staff(self) -> bool:
		return self.role == ActorRole.STAFF

	@property
	def is_customer(self) -> bool:
		return self.role == ActorRole.CUSTOMER


SYSTEM = Actor(id="system", role=ActorRole.SYSTEM)
