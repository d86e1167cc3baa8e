import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from litverse.config import settings
from litverse.database import create_db_and_tables
from litverse.errors import LitVerseError
from litverse.routes import (
    ai,
    auth,
    books,
    gamification,
    health,
    payments,
    realtime,
    social,
    users,
)
from litverse.utils.clock import utc_now

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="LitVerse API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- ERROR ENVELOPE ----------
def error_response(request: Request, status_code: int, error: str, details=None) -> JSONResponse:
    body = {
        "error": error,
        "timestamp": utc_now().isoformat(),
        "path": request.url.path,
    }
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(LitVerseError)
async def litverse_error_handler(request: Request, exc: LitVerseError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(request, exc.status_code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return error_response(request, 400, "Validation Error", details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(request, 404, "Route not found")
    return error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(request, 500, "Internal Server Error")


app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(books.router, prefix="/api/books", tags=["Books"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(ai.router, prefix="/api/ai", tags=["AI"])
app.include_router(social.router, prefix="/api/social", tags=["Social"])
app.include_router(gamification.router, prefix="/api/gamification", tags=["Gamification"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(realtime.router)


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/api/auth/register", "/api/auth/login", "/api/auth/me"],
        "book_endpoints": ["/api/books", "/api/books/{book_id}", "/api/books/search/{query}"],
        "user_endpoints": ["/api/users/profile", "/api/users/library", "/api/users/reading-progress"],
        "gamification": ["/api/gamification/achievements", "/api/gamification/leaderboard"],
        "payments": ["/api/payments/quote", "/api/payments/checkout", "/api/payments/orders"],
        "realtime": ["/ws"],
    }
