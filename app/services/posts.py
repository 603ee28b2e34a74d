import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import and_, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.post_filters import AllOf, AnyOf, Filter, MatchAll, Pattern, build_search_filter
from models.post import Post, PostTag, utc_now

logger = logging.getLogger("journal.posts")

_SCALAR_COLUMNS = {
    "title": Post.title,
    "content": Post.content,
    "location": Post.location,
}


def compile_filter(expr: Filter):
    if isinstance(expr, MatchAll):
        return true()
    if isinstance(expr, Pattern):
        # inline flag form is understood by SQLite (Python re), PostgreSQL and MySQL
        pattern = f"(?i){expr.pattern}" if expr.ignore_case else expr.pattern
        if expr.field == "tags":
            return Post.tag_rows.any(PostTag.value.regexp_match(pattern))
        column = _SCALAR_COLUMNS.get(expr.field)
        if column is None:
            raise ValueError(f"unknown filter field: {expr.field}")
        return column.regexp_match(pattern)
    if isinstance(expr, AnyOf):
        return or_(*(compile_filter(c) for c in expr.clauses))
    if isinstance(expr, AllOf):
        return and_(*(compile_filter(c) for c in expr.clauses))
    raise TypeError(f"unsupported filter node: {expr!r}")


def normalize_tags(tags) -> list[str]:
    if not tags:
        return []
    if isinstance(tags, str):
        return [tags]
    # empty form inputs arrive as ""
    return [str(t) for t in tags if t != ""]


def set_tags(post: Post, tags) -> list[str]:
    """Replace the tag sequence, leaving `tag_rows` loaded so no lazy load happens after commit."""
    values = normalize_tags(tags)
    post.tag_rows = [PostTag(position=i, value=v) for i, v in enumerate(values)]
    return values


def touch(post: Post, now: datetime | None = None) -> datetime:
    post.updated_at = now or utc_now()
    return post.updated_at


async def save_post(db: AsyncSession, post: Post, *, now: datetime | None = None) -> Post:
    """Persist ``post``; every write goes through here so ``updated_at`` is always refreshed."""
    touch(post, now)
    db.add(post)
    await db.commit()
    return post


async def list_posts(db: AsyncSession, expr: Filter | None = None) -> Sequence[Post]:
    query = (
        select(Post)
        .where(compile_filter(expr or MatchAll()))
        .order_by(Post.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


async def search_posts(db: AsyncSession, search: str | None) -> Sequence[Post]:
    return await list_posts(db, build_search_filter(search))


async def get_post(db: AsyncSession, post_id: str) -> Post | None:
    result = await db.execute(select(Post).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def create_post(
    db: AsyncSession,
    *,
    title: str,
    content: str,
    image_url: str | None = None,
    location: str | None = None,
    tags=None,
) -> Post:
    now = utc_now()
    post = Post(
        title=title,
        content=content,
        image_url=image_url,
        location=location,
        created_at=now,
        updated_at=now,
    )
    values = set_tags(post, tags)
    await save_post(db, post, now=now)
    logger.info("POST_CREATE id=%s tags=%d image=%d", post.id, len(values), int(bool(image_url)))
    return post


async def replace_post(
    db: AsyncSession,
    post: Post,
    *,
    title: str | None,
    content: str | None,
    image_url: str | None,
    location: str | None,
    tags=None,
) -> Post:
    post.title = title
    post.content = content
    post.image_url = image_url
    post.location = location
    set_tags(post, tags)
    await save_post(db, post)
    logger.info("POST_UPDATE id=%s", post.id)
    return post


async def delete_post(db: AsyncSession, post_id: str) -> bool:
    post = await get_post(db, post_id)
    if not post:
        return False
    await db.delete(post)
    await db.commit()
    logger.info("POST_DELETE id=%s", post_id)
    return True


async def list_tags(db: AsyncSession) -> list[str]:
    result = await db.execute(select(PostTag.value).distinct().order_by(PostTag.value))
    return [value for (value,) in result]
