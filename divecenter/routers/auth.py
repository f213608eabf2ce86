import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from divecenter.database import get_db
from divecenter.schemas.user import LoginRequest, SessionResponse
import divecenter.services.user_service as user_svc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# ── Rate limiting (in-memory, per IP) ──────────────────────────────────────
_login_attempts: dict[str, list[float]] = defaultdict(list)
_RATE_LIMIT_WINDOW = 60   # seconds
_RATE_LIMIT_MAX = 10      # max attempts per window


def _check_rate_limit(ip: str) -> bool:
    now = time.time()
    _login_attempts[ip] = [t for t in _login_attempts[ip] if now - t < _RATE_LIMIT_WINDOW]
    if len(_login_attempts[ip]) >= _RATE_LIMIT_MAX:
        return False
    _login_attempts[ip].append(now)
    return True


def _reset_rate_limit(ip: str) -> None:
    """Clear failed attempts after successful login."""
    _login_attempts.pop(ip, None)


# ── Session dependencies ───────────────────────────────────────────────────
def current_dive_center(request: Request) -> int:
    """Dependency: tenant id of the logged-in user."""
    dive_center_id = request.session.get("dive_center_id")
    if not request.session.get("user_id") or dive_center_id is None:
        raise HTTPException(status_code=401, detail="Login required")
    return dive_center_id


def require_session_admin(request: Request) -> int:
    """Session-only check, admin only. Returns the user id for audit lines."""
    if not request.session.get("user_id"):
        raise HTTPException(status_code=401, detail="Login required")
    if request.session.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Administrators only")
    return request.session["user_id"]


@router.post("/login", response_model=SessionResponse)
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    ip = request.client.host if request.client else "unknown"
    if not _check_rate_limit(ip):
        logger.warning("AUDIT: login rate limit hit from %s", ip)
        raise HTTPException(status_code=429, detail="Too many login attempts, try again in a minute")

    user = user_svc.authenticate(db, data.username, data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    _reset_rate_limit(ip)
    request.session.clear()
    request.session["user_id"] = user.id
    request.session["username"] = user.username
    request.session["role"] = user.role
    request.session["dive_center_id"] = user.dive_center_id
    return SessionResponse(
        user_id=user.id,
        username=user.username,
        role=user.role,
        dive_center_id=user.dive_center_id,
    )


@router.post("/logout", status_code=204)
def logout(request: Request):
    username = request.session.get("username")
    request.session.clear()
    if username:
        logger.info("AUDIT: user %s logged out", username)
    return Response(status_code=204)


@router.get("/me", response_model=SessionResponse)
def me(request: Request, dive_center_id: int = Depends(current_dive_center)):
    return SessionResponse(
        user_id=request.session["user_id"],
        username=request.session.get("username", ""),
        role=request.session.get("role", ""),
        dive_center_id=dive_center_id,
    )
