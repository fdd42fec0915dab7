import json
from typing import Any, Dict, Optional

# load environment variables before anything reads them
from pathlib import Path
from dotenv import load_dotenv
load_dotenv(Path(__file__).with_name(".env"), override=False)

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings_obj
from data.mongo_connection import get_connection
from logic.validation import validate_submission
from services.errors import MethodError, ValidationError, WaitlistError
from services.waitlist_service import save_waitlist_submission


WAITLIST_PATH = "/api/submit-waitlist"

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With"

METHOD_NOT_ALLOWED = "Method not allowed"

USAGE = "POST to this endpoint with email, fullname, and position fields"


app = FastAPI(
    title="Waitlist API",
    description="Collects waitlist signups and stores them in MongoDB.",
    version="0.1.0",
)


class WaitlistRequest(BaseModel):
    """Fields stay loosely typed; logic.validation decides what is acceptable."""

    email: Optional[Any] = None
    fullname: Optional[Any] = None
    position: Optional[Any] = None


def _allow_origin(origin: Optional[str]) -> str:
    allowed = get_settings_obj().CORS_ALLOWED_ORIGINS
    if not allowed:
        return origin or "*"
    if origin and origin in allowed:
        return origin
    return allowed[0]


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = _allow_origin(request.headers.get("origin"))
    response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    response.headers["Access-Control-Allow-Credentials"] = "true"
    if request.headers.get("origin"):
        response.headers["Vary"] = "Origin"
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == MethodError.status_code:
        # Verbs outside the route's method list never reach submit_waitlist.
        return _error(exc.status_code, METHOD_NOT_ALLOWED)
    return _error(exc.status_code, exc.detail)


@app.exception_handler(WaitlistError)
async def waitlist_error(request: Request, exc: WaitlistError) -> JSONResponse:
    if exc.status_code < 500:
        return _error(exc.status_code, exc.message)
    print(f"[waitlist] submission failed ({exc.code}): {exc.__cause__ or exc!r}")
    return JSONResponse(status_code=exc.status_code, content={
        "error": "Failed to add to waitlist",
        "details": exc.message,
    })


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_body(request: Request) -> Optional[Dict[str, Any]]:
    """Returns the JSON object body, {} for an empty body, None if unusable."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _submit(body: WaitlistRequest) -> Dict[str, Any]:
    cleaned = validate_submission(body.email, body.fullname, body.position)
    db = get_connection()
    return save_waitlist_submission(db, cleaned["email"], cleaned["fullname"], cleaned["position"])


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.api_route(WAITLIST_PATH, methods=["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE", "HEAD"])
async def submit_waitlist(request: Request) -> Response:
    """
    Waitlist signup endpoint.

    OPTIONS is the CORS preflight, GET describes usage, POST stores a
    submission. Every other method gets a 405.
    """
    method = request.method.upper()

    if method == "OPTIONS":
        return Response(status_code=200)

    if method == "GET":
        return JSONResponse(status_code=200, content={
            "message": "Waitlist API endpoint",
            "usage": USAGE,
        })

    if method != "POST":
        raise MethodError(METHOD_NOT_ALLOWED)

    payload = await _read_body(request)
    if payload is None:
        raise ValidationError("Invalid request body")

    body = WaitlistRequest(**payload)

    try:
        data = await run_in_threadpool(_submit, body)
    except WaitlistError:
        raise
    except Exception as e:
        raise WaitlistError(str(e)) from e

    return JSONResponse(status_code=200, content={
        "success": True,
        "message": "Successfully added to waitlist",
        "data": data,
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
