from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.validations.exceptions import RequestValidationError
from app.db.mixins import ActiveFlagMixin


async def validate_relations(session: AsyncSession, validation: dict[str, tuple]):
    """Check every referenced row exists (and is active, where the model has a flag)."""
    errors = {}
    for key, (schema, value) in validation.items():
        if value == None:
            continue
        query = exists().where(schema.id == value)
        if issubclass(schema, ActiveFlagMixin):
            query = query.where(schema.is_active == True)
        if not await session.scalar(select(query)):
            errors[key] = f"invalid {key}"
    if errors:
        raise RequestValidationError(**errors)
    return True


async def validate_unique(session: AsyncSession, **kwargs):
    unique = kwargs.get("unique", {})
    exclude_id = kwargs.get("exclude_id")
    errors = {}
    for key, (schema, value) in unique.items():
        if not value:
            continue
        query = exists().where(getattr(schema, key) == value)
        if exclude_id is not None:
            query = query.where(schema.id != exclude_id)
        if await session.scalar(select(query)):
            errors[key] = f"{key} already exists"
    if errors:
        raise RequestValidationError(**errors)
    return True
