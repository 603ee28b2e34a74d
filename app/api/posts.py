import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from app.database import get_db
from app.services import posts as post_service
from app.storage.media import MediaUploadError, upload_image
from schemas.post import MessageResponse, PostCreate, PostResponse, PostUpdate

router = APIRouter()
logger = logging.getLogger("journal.posts")


class PostSubmission:
    def __init__(self, data, image: UploadFile | None = None):
        self.data = data
        self.image = image


def error_reason(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig or exc)


async def _read_body(request: Request) -> tuple[dict, UploadFile | None]:
    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith("application/json"):
        try:
            raw = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Malformed JSON body")
        if not isinstance(raw, dict):
            raise HTTPException(status_code=400, detail="Request body must be an object")
        return raw, None
    form = await request.form()
    raw: dict = {}
    image = None
    for key in form.keys():
        if key == "image":
            value = form.get("image")
            if isinstance(value, UploadFile) and value.filename:
                image = value
            continue
        if key == "tags":
            raw["tags"] = form.getlist("tags")
            continue
        value = form.get(key)
        if isinstance(value, UploadFile):
            raise HTTPException(status_code=400, detail=f"Unexpected file field: {key}")
        raw[key] = value
    return raw, image


async def _read_submission(request: Request, model: type[BaseModel]) -> PostSubmission:
    raw, image = await _read_body(request)
    try:
        data = model.model_validate(raw)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in exc.errors()
        )
        raise HTTPException(status_code=400, detail=f"Invalid request: {messages}")
    return PostSubmission(data, image)


async def read_post_create(request: Request) -> PostSubmission:
    return await _read_submission(request, PostCreate)


async def read_post_update(request: Request) -> PostSubmission:
    return await _read_submission(request, PostUpdate)


async def _upload(image: UploadFile) -> str:
    payload = await image.read()
    return await upload_image(payload, image.content_type)


@router.get("", response_model=List[PostResponse])
async def list_posts(search: str | None = None, db: AsyncSession = Depends(get_db)):
    try:
        posts = await post_service.search_posts(db, search)
    except SQLAlchemyError as exc:
        logger.exception("POST_LIST_FAIL search=%r", search)
        raise HTTPException(status_code=500, detail=error_reason(exc))
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db)):
    try:
        post = await post_service.get_post(db, post_id)
    except SQLAlchemyError as exc:
        logger.exception("POST_GET_FAIL id=%s", post_id)
        raise HTTPException(status_code=500, detail=error_reason(exc))
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostResponse.model_validate(post)


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    submission: PostSubmission = Depends(read_post_create),
    db: AsyncSession = Depends(get_db),
):
    data = submission.data
    if data.missing_required():
        raise HTTPException(status_code=400, detail="Title and content are required")
    try:
        image_url = None
        if submission.image is not None:
            image_url = await _upload(submission.image)
        post = await post_service.create_post(
            db,
            title=data.title,
            content=data.content,
            image_url=image_url,
            location=data.location,
            tags=data.tags,
        )
    except (MediaUploadError, SQLAlchemyError) as exc:
        await db.rollback()
        logger.exception("POST_CREATE_FAIL title=%r", data.title)
        raise HTTPException(status_code=400, detail=f"Failed to create post: {error_reason(exc)}")
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    submission: PostSubmission = Depends(read_post_update),
    db: AsyncSession = Depends(get_db),
):
    data = submission.data
    try:
        existing = await post_service.get_post(db, post_id)
        if not existing:
            raise HTTPException(status_code=404, detail="Post not found")
        if data.missing_required():
            raise HTTPException(status_code=400, detail="Title and content are required")
        if submission.image is not None:
            image_url = await _upload(submission.image)
        else:
            image_url = data.image_url or existing.image_url
        post = await post_service.replace_post(
            db,
            existing,
            title=data.title,
            content=data.content,
            image_url=image_url,
            location=data.location,
            tags=data.tags,
        )
    except (MediaUploadError, SQLAlchemyError) as exc:
        await db.rollback()
        logger.exception("POST_UPDATE_FAIL id=%s", post_id)
        raise HTTPException(status_code=400, detail=f"Failed to update post: {error_reason(exc)}")
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: str, db: AsyncSession = Depends(get_db)):
    try:
        deleted = await post_service.delete_post(db, post_id)
    except SQLAlchemyError as exc:
        logger.exception("POST_DELETE_FAIL id=%s", post_id)
        raise HTTPException(status_code=500, detail=error_reason(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail="Post not found")
    return MessageResponse(message="Post deleted successfully")
