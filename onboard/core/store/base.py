# (c) Copyright Datacraft, 2026
"""Abstract entity store interface."""
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Mapping, TypeVar

from pydantic import BaseModel

E = TypeVar("E", bound=BaseModel)

# Operator suffixes accepted in `where` keys, e.g. {"date__gte": start}
OPERATORS = ("eq", "ne", "in", "gt", "gte", "lt", "lte")


def split_lookup(key: str) -> tuple[str, str]:
	"""Split "field__op" into (field, op); a bare field means equality."""
	field, sep, op = key.rpartition("__")
	if sep and op in OPERATORS:
		return field, op
	return key, "eq"


class EntityStore(ABC):
	"""Keyed records grouped by kind, where a kind is a pydantic schema class."""

	@abstractmethod
	async def create(self, entity: E) -> E:
		"""Persist a new entity.

		Stamps `created_at` and the modification timestamp where the kind
		has them.

		Returns:
			The entity as stored
		"""
		...

	@abstractmethod
	async def get(self, kind: type[E], entity_id: str) -> E:
		"""Fetch one entity.

		Raises:
			NotFoundError: If no entity of that kind has the id
		"""
		...

	@abstractmethod
	async def update(
		self,
		kind: type[E],
		entity_id: str,
		fields: Mapping[str, Any],
		expected_revision: int | None = None,
	) -> E:
		"""Merge fields into an existing entity.

		Kinds carrying a `revision` field get it incremented on every write.
		With `expected_revision` the write only applies if the stored
		revision still matches.

		Returns:
			The entity after the write

		Raises:
			NotFoundError: If the entity does not exist
			ConflictError: If the stored revision differs from expected_revision
		"""
		...

	@abstractmethod
	async def delete(self, kind: type[E], entity_id: str) -> None:
		"""Remove an entity.

		Raises:
			NotFoundError: If the entity does not exist
		"""
		...

	@abstractmethod
	def list_where(
		self,
		kind: type[E],
		where: Mapping[str, Any] | None = None,
		order_by: str | None = None,
		descending: bool = False,
	) -> AsyncIterator[E]:
		"""Iterate over entities matching all `where` conditions.

		Keys are field names with an optional operator suffix
		(`__ne`, `__in`, `__gt`, `__gte`, `__lt`, `__lte`). Order is
		unspecified unless `order_by` is given.
		"""
		...

	async def find(
		self,
		kind: type[E],
		where: Mapping[str, Any] | None = None,
		order_by: str | None = None,
		descending: bool = False,
	) -> list[E]:
		return [
			entity async for entity in self.list_where(
				kind, where, order_by=order_by, descending=descending
			)
		]
