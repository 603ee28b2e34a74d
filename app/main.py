import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api import posts as posts_api
from app.api import tags as tags_api
from app.config import settings, split_csv
from app.database import create_tables

DEFAULT_ORIGINS = ["http://localhost:5173"]

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
logging.getLogger("journal").setLevel(settings.LOG_LEVEL.upper())
logger = logging.getLogger("journal")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("SERVER_READY port=%s", settings.PORT)
    yield


app = FastAPI(title="Travel Journal API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=split_csv(settings.CORS_ORIGINS, DEFAULT_ORIGINS),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(posts_api.router, prefix="/api/posts", tags=["posts"])
app.include_router(tags_api.router, prefix="/api/tags", tags=["tags"])


@app.get("/")
async def root():
    return {"message": "Travel Journal API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
