import logging

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.categories.models import DEFAULT_CATEGORY_COLOR, EventCategories
from app.api.categories.schemas import CategoryCreate, CategoryUpdate
from app.api.events.models import Events
from app.core.utils.keys import generate_slug
from app.core.validations.schema import validate_unique
from app.response import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


async def list_categories(session: AsyncSession, include_inactive: bool = False):
    event_count = (
        select(func.count(Events.id))
        .where(Events.category_id == EventCategories.id, Events.is_active == True)
        .correlate(EventCategories)
        .scalar_subquery()
    )
    query = select(EventCategories, event_count.label("event_count")).order_by(
        EventCategories.category_name
    )
    if not include_inactive:
        query = query.where(EventCategories.is_active == True)
    result = await session.execute(query)
    categories = []
    for category, count in result.all():
        category.event_count = count or 0
        categories.append(category)
    return categories


async def get_category(session: AsyncSession, category_id: int):
    category = await session.get(EventCategories, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def get_category_by_code(session: AsyncSession, code: str):
    category = await session.scalar(
        select(EventCategories).where(EventCategories.code == code)
    )
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def create_category(session: AsyncSession, category: CategoryCreate):
    code = category.code or generate_slug(category.category_name)
    await validate_unique(
        session,
        unique={
            "category_name": (EventCategories, category.category_name),
            "code": (EventCategories, code),
        },
    )
    db_category = EventCategories(
        category_name=category.category_name,
        code=code,
        description=category.description,
        color_hex=category.color_hex or DEFAULT_CATEGORY_COLOR,
    )
    session.add(db_category)
    await session.commit()
    await session.refresh(db_category)
    logger.info("Category %s created", db_category.code)
    return db_category


async def update_category(
    session: AsyncSession, category_id: int, category: CategoryUpdate
):
    db_category = await get_category(session, category_id)
    data = category.model_dump(exclude_unset=True)
    await validate_unique(
        session,
        unique={
            "category_name": (EventCategories, data.get("category_name")),
            "code": (EventCategories, data.get("code")),
        },
        exclude_id=category_id,
    )
    for key, value in data.items():
        if key in ("category_name", "code") and value is None:
            continue
        setattr(db_category, key, value)
    await session.commit()
    await session.refresh(db_category)
    return db_category


async def set_category_active(session: AsyncSession, category_id: int, active: bool):
    db_category = await get_category(session, category_id)
    if active:
        db_category.reactivate()
    else:
        db_category.deactivate()
    await session.commit()
    await session.refresh(db_category)
    logger.info(
        "Category %s %s", db_category.code, "reactivated" if active else "deactivated"
    )
    return db_category


async def delete_category(session: AsyncSession, category_id: int):
    """Hard delete, refused while any event (active or not) still points at the category."""
    db_category = await get_category(session, category_id)
    in_use = await session.scalar(
        select(exists().where(Events.category_id == category_id))
    )
    if in_use:
        raise ConflictError(
            "Category is used by existing events, deactivate it instead"
        )
    await session.delete(db_category)
    await session.commit()
    logger.info("Category %s deleted", category_id)
    return {"message": "Category deleted"}
