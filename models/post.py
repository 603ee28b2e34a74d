import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_post_id() -> str:
    return uuid.uuid4().hex


class PostTag(Base):
    __tablename__ = "post_tags"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(String(32), ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    value = Column(String, index=True, nullable=False)


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(32), primary_key=True, default=new_post_id)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    location = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime, nullable=False, default=utc_now)

    # ordered, duplicates allowed
    tag_rows = relationship(
        PostTag,
        order_by=PostTag.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    tags = association_proxy("tag_rows", "value", creator=lambda value: PostTag(value=value))
