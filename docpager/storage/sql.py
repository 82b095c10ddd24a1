"""
Document store adapter for SQLModel tables.

Translates the pagination filter language into SQLAlchemy clauses and runs
count/find queries through an async session. Database failures are raised
as StoreUnavailable.
"""

from collections.abc import Callable, Sequence
from typing import Any, Type, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from docpager.exceptions import InvalidArgument, StoreUnavailable
from docpager.logging import logger
from docpager.protocols import SortSpec
from docpager.schemas.request import SortDirection
from docpager.settings import app_settings

GenericSQLModelType = TypeVar("GenericSQLModelType", bound=SQLModel)

ApplyFilters = Callable[[Select, Type[SQLModel], dict[str, Any]], Select]

_SQL_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "$eq": lambda attr, v: attr == v,
    "$ne": lambda attr, v: attr != v,
    "$lt": lambda attr, v: attr < v,
    "$lte": lambda attr, v: attr <= v,
    "$gt": lambda attr, v: attr > v,
    "$gte": lambda attr, v: attr >= v,
    "$in": lambda attr, v: attr.in_(v),
}


def default_apply_filters(
    query: Select, model: Type[SQLModel], filters: dict[str, Any]
) -> Select:
    """
    Apply default filters to a SQLModel query.

    String filters use case-insensitive ILIKE pattern matching with
    wildcards. Lists and tuples become IN clauses. Operator mappings such as
    ``{"$lt": 10}`` become comparison clauses. Other types use equality.

    Args:
        query (Select): The SQLModel query to apply filters to.
        model (Type[SQLModel]): The SQLModel class being queried.
        filters (dict[str, Any]): A dictionary of filters to apply.

    Returns:
        Select: The updated query with the filters applied.

    Raises:
        InvalidArgument: If a filter key is not an attribute of the model
            or an operator is not supported.
    """
    for key, value in filters.items():
        if not hasattr(model, key):
            raise InvalidArgument(
                f"Invalid filter: {key} is not an attribute of {model.__name__}"
            )

        attr = getattr(model, key)
        if isinstance(value, dict):
            for op_name, operand in value.items():
                op = _SQL_OPERATORS.get(op_name)
                if op is None:
                    raise InvalidArgument(
                        f"Unsupported filter operator {op_name!r} on {key}"
                    )
                query = query.filter(op(attr, operand))
        elif isinstance(value, (list, tuple)):
            query = query.filter(attr.in_(value))
        elif isinstance(value, str):
            # Use case-insensitive ILIKE for string filters
            query = query.filter(attr.ilike(f"%{value}%"))
        else:
            query = query.filter(attr == value)
    return query


def create_session_factory(
    database_url: str | None = None,
) -> sessionmaker:
    """
    Create an async session factory for the configured database.

    Args:
        database_url: Database URL. Defaults to app_settings.DATABASE_URL.

    Returns:
        sessionmaker producing AsyncSession instances.
    """
    engine: AsyncEngine = create_async_engine(
        database_url or app_settings.DATABASE_URL,
        echo=False,
        pool_size=app_settings.DB_POOL_SIZE,
        max_overflow=app_settings.DB_MAX_OVERFLOW,
        pool_recycle=app_settings.DB_POOL_RECYCLE,
        pool_pre_ping=app_settings.DB_POOL_PRE_PING,
    )
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


class SQLModelDocumentStore:
    """
    Document store over one SQLModel table.

    Example:
        ```python
        from docpager import paginate_with_offset
        from docpager.storage.sql import (
            SQLModelDocumentStore,
            create_session_factory,
        )

        store = SQLModelDocumentStore(Article, create_session_factory())
        page = await paginate_with_offset(store, {"status": "live"}, {"page": 2})
        ```
    """

    def __init__(
        self,
        model: Type[GenericSQLModelType],
        session_factory: Callable[[], AsyncSession],
        id_field: str = "id",
        apply_filters: ApplyFilters | None = None,
    ) -> None:
        self.model = model
        self.session_factory = session_factory
        self.id_field = id_field
        self.apply_filters = apply_filters or default_apply_filters
        self.name = model.__name__
        self.document_type = model

    async def count(self, filter: dict[str, Any]) -> int:
        # Count on primary key instead of a subquery
        query = select(func.count(getattr(self.model, self.id_field)))
        if filter:
            query = self.apply_filters(query, self.model, filter)

        try:
            async with self.session_factory() as session:
                result = await session.exec(query)
                return result.one()
        except SQLAlchemyError as ex:
            logger.error(f"Count query failed for {self.name}: {ex}")
            raise StoreUnavailable(f"Count query failed for {self.name}") from ex

    async def find(
        self,
        filter: dict[str, Any],
        sort: SortSpec | None = None,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Sequence[GenericSQLModelType]:
        query: Select = select(self.model)
        if filter:
            query = self.apply_filters(query, self.model, filter)

        for field, direction in sort or []:
            if not hasattr(self.model, field):
                raise InvalidArgument(
                    f"Invalid sort: {field} is not an attribute of {self.name}"
                )
            attr = getattr(self.model, field)
            query = query.order_by(
                attr.desc() if direction == SortDirection.DESC else attr.asc()
            )

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        try:
            async with self.session_factory() as session:
                results = await session.exec(query)
                return results.all()
        except SQLAlchemyError as ex:
            logger.error(f"Find query failed for {self.name}: {ex}")
            raise StoreUnavailable(f"Find query failed for {self.name}") from ex
