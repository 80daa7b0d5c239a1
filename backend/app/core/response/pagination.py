from typing import Annotated, Any, Callable, Generic, TypeVar, List, Type
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends, Query as GetQuery

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class _PaginationParams(BaseModel):
    """Pagination parameters as a Pydantic model"""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination_params(
    page: Annotated[int, GetQuery(ge=1)] = 1,
    limit: Annotated[int, GetQuery(ge=1, le=100)] = 10,
) -> _PaginationParams:
    return _PaginationParams(page=page, limit=limit)


class PaginatedResponse(BaseModel, Generic[T]):
    total: int
    page: int
    limit: int
    items: List[T]


async def paginate(
    query: Select,
    schema: Type[M],
    pagination: _PaginationParams,
    db_session: AsyncSession,
    transform: Callable[[Any], Any] | None = None,
) -> PaginatedResponse[M]:
    """
    Generic pagination for select() statements returning one entity or
    labelled rows. ``transform`` reshapes each row before validation.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db_session.scalar(count_query) or 0

    result = await db_session.execute(
        query.offset(pagination.offset).limit(pagination.limit)
    )
    rows = result.all()

    items = []
    for row in rows:
        if transform:
            items.append(schema.model_validate(transform(row), from_attributes=True))
        elif len(row) == 1:
            items.append(schema.model_validate(row[0], from_attributes=True))
        else:
            items.append(schema.model_validate(row._asdict()))

    return PaginatedResponse[M](
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        items=items,
    )


PaginationParams = Annotated[_PaginationParams, Depends(get_pagination_params)]
