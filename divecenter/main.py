from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager
import os

from divecenter.database import engine, SessionLocal
from divecenter.database import Base
import divecenter.models  # noqa: F401 (registers the mappers)
from divecenter.models.dive_center import DiveCenter
from divecenter.models.user import User
from divecenter.config import settings
from divecenter.services.user_service import hash_password
from divecenter.routers import health, auth, assignments, baskets, items, packages, dives
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Ensure DB exists and tables are created (for dev mode without alembic)
    if settings.DATABASE_URL.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)
    Base.metadata.create_all(bind=engine)

    # Default tenant and its first admin on an empty database
    db = SessionLocal()
    try:
        if not db.query(User).first():
            center = db.query(DiveCenter).first()
            if center is None:
                center = DiveCenter(name=settings.DEFAULT_DIVE_CENTER)
                db.add(center)
                db.flush()
            admin = User(
                dive_center_id=center.id,
                username=settings.FIRST_ADMIN_USER,
                email=f"{settings.FIRST_ADMIN_USER}@divecenter.local",
                hashed_password=hash_password(settings.FIRST_ADMIN_PASS),
                role="admin",
                is_active=True,
            )
            db.add(admin)
            db.commit()
            logger.info("Created first admin user %s for %s", settings.FIRST_ADMIN_USER, center.name)
    finally:
        db.close()

    yield


app = FastAPI(
    title="DiveCenter Equipment",
    description="Equipment reservation, basket and dive package service for dive centers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    https_only=settings.APP_ENV == "production",
    same_site="lax",
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.APP_ENV == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(assignments.router)
app.include_router(baskets.router)
app.include_router(items.router)
app.include_router(packages.router)
app.include_router(dives.router)
