# (c) Copyright Datacraft, 2026
"""SQLAlchemy implementation of the entity store."""
import logging
from enum import Enum
from typing import Any, AsyncIterator, Mapping

from pydantic_core import to_jsonable_python
from sqlalchemy import JSON, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onboard.core.db.base import Base
from onboard.core.exceptions import ConflictError, NotFoundError, StoreError
from onboard.core.utils.clock import utc_now

from .base import E, EntityStore, split_lookup
from .orm import MODELS

logger = logging.getLogger(__name__)


class SqlEntityStore(EntityStore):
	def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
		self._session_factory = session_factory

	# ===== Mapping helpers =====

	def _model(self, kind: type) -> type[Base]:
		try:
			return MODELS[kind.__name__]
		except KeyError:
			raise ValueError(f"No table stores {kind.__name__}") from None

	def _to_columns(self, model: type[Base], data: Mapping[str, Any]) -> dict[str, Any]:
		columns = model.__table__.columns
		values: dict[str, Any] = {}
		for key, value in data.items():
			if key not in columns:
				raise ValueError(f"{model.__name__} has no column '{key}'")
			if isinstance(columns[key].type, JSON):
				values[key] = to_jsonable_python(value)
			elif isinstance(value, Enum):
				values[key] = value.value
			else:
				values[key] = value
		return values

	def _condition(self, model: type[Base], key: str, value: Any):
		field, op = split_lookup(key)
		if field not in model.__table__.columns:
			raise ValueError(f"{model.__name__} has no column '{field}'")
		column = getattr(model, field)

		if op == "in":
			return column.in_([v.value if isinstance(v, Enum) else v for v in value])
		if isinstance(value, Enum):
			value = value.value

		if op == "eq":
			return column.is_(None) if value is None else column == value
		if op == "ne":
			return column.is_not(None) if value is None else column != value
		if op == "gt":
			return column > value
		if op == "gte":
			return column >= value
		if op == "lt":
			return column < value
		return column <= value

	def _fail(self, action: str, kind: type, e: SQLAlchemyError) -> StoreError:
		logger.error(f"Failed to {action} {kind.__name__}: {e}")
		return StoreError(f"Failed to {action} {kind.__name__}", e)

	# ===== EntityStore =====

	async def create(self, entity: E) -> E:
		kind = type(entity)
		model = self._model(kind)
		data = entity.model_dump()
		columns = model.__table__.columns

		now = utc_now()
		if "created_at" in columns and data.get("created_at") is None:
			data["created_at"] = now
		modified = getattr(model, "__modified_column__", None)
		if modified:
			data[modified] = data.get("created_at") or now

		try:
			async with self._session_factory() as session:
				row = model(**self._to_columns(model, data))
				session.add(row)
				await session.commit()
				await session.refresh(row)
				return kind.model_validate(row)
		except SQLAlchemyError as e:
			raise self._fail("create", kind, e) from e

	async def get(self, kind: type[E], entity_id: str) -> E:
		model = self._model(kind)
		try:
			async with self._session_factory() as session:
				row = await session.get(model, entity_id)
				if row is None:
					raise NotFoundError(kind.__name__, entity_id)
				return kind.model_validate(row)
		except SQLAlchemyError as e:
			raise self._fail("get", kind, e) from e

	async def update(
		self,
		kind: type[E],
		entity_id: str,
		fields: Mapping[str, Any],
		expected_revision: int | None = None,
	) -> E:
		model = self._model(kind)
		columns = model.__table__.columns
		values = self._to_columns(model, {k: v for k, v in fields.items() if k != "revision"})

		modified = getattr(model, "__modified_column__", None)
		if modified:
			values[modified] = utc_now()

		stmt = update(model).where(model.id == entity_id)
		if "revision" in columns:
			values["revision"] = model.revision + 1
			if expected_revision is not None:
				stmt = stmt.where(model.revision == expected_revision)
		elif expected_revision is not None:
			raise ValueError(f"{kind.__name__} has no revision to compare")

		stmt = stmt.values(**values).execution_options(synchronize_session=False)

		try:
			async with self._session_factory() as session:
				result = await session.execute(stmt)
				if result.rowcount == 0:
					await session.rollback()
					if await session.get(model, entity_id) is None:
						raise NotFoundError(kind.__name__, entity_id)
					logger.debug(
						f"Revision mismatch on {kind.__name__} {entity_id}"
						f" (expected {expected_revision})"
					)
					raise ConflictError(kind.__name__, entity_id, expected_revision)
				await session.commit()
				row = await session.get(model, entity_id, populate_existing=True)
				return kind.model_validate(row)
		except SQLAlchemyError as e:
			raise self._fail("update", kind, e) from e

	async def delete(self, kind: type[E], entity_id: str) -> None:
		model = self._model(kind)
		try:
			async with self._session_factory() as session:
				result = await session.execute(
					delete(model).where(model.id == entity_id)
				)
				if result.rowcount == 0:
					await session.rollback()
					raise NotFoundError(kind.__name__, entity_id)
				await session.commit()
		except SQLAlchemyError as e:
			raise self._fail("delete", kind, e) from e

	async def list_where(
		self,
		kind: type[E],
		where: Mapping[str, Any] | None = None,
		order_by: str | None = None,
		descending: bool = False,
	) -> AsyncIterator[E]:
		model = self._model(kind)
		stmt = select(model)
		for key, value in (where or {}).items():
			stmt = stmt.where(self._condition(model, key, value))

		if order_by is not None:
			if order_by not in model.__table__.columns:
				raise ValueError(f"{model.__name__} has no column '{order_by}'")
			column = getattr(model, order_by)
			stmt = stmt.order_by(column.desc() if descending else column.asc())
			stmt = stmt.order_by(model.id.desc() if descending else model.id.asc())

		try:
			async with self._session_factory() as session:
				rows = (await session.scalars(stmt)).all()
				entities = [kind.model_validate(row) for row in rows]
		except SQLAlchemyError as e:
			raise self._fail("list", kind, e) from e

		for entity in entities:
			yield entity
