import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from database import engine, Base
from errors import FriendshipError
from api.auth import router as auth_router
from api.users import router as users_router
from api.friends import router as friends_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail fast on missing secrets
    if not settings.JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY is not set. Set it in your .env file.")
    logger.info("Starting friends backend...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Friends backend ready")
    yield
    await engine.dispose()
    logger.info("Friends backend shut down")


app = FastAPI(
    title="Friends API",
    description="Friendship requests and friend profiles",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FriendshipError)
async def friendship_error_handler(request: Request, exc: FriendshipError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(friends_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "friends"}
