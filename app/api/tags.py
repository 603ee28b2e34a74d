import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.posts import error_reason
from app.database import get_db
from app.services.posts import list_tags

router = APIRouter()
logger = logging.getLogger("journal.tags")


@router.get("", response_model=List[str])
async def get_tags(db: AsyncSession = Depends(get_db)):
    try:
        return await list_tags(db)
    except SQLAlchemyError as exc:
        logger.exception("TAG_LIST_FAIL")
        raise HTTPException(status_code=500, detail=error_reason(exc))
