from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from .config import settings
from .errors import QuotationError, ValidationError
from .routers import quotation

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("quotegen")

app = FastAPI(
    title="Quotation Generator",
    description="Turns quotation records into print-ready PDF documents",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class BodySizeLimit:
    """
    Refuse request bodies over MAX_BODY_BYTES. A declared Content-Length is
    checked before the route runs; chunked bodies are counted as they arrive.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.MAX_BODY_BYTES
        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > limit:
            logger.warning("Rejected %s %s: body of %s bytes", scope["method"], scope["path"], length)
            response = JSONResponse({"error": "Request body too large"}, status_code=413)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning("Rejected %s %s: streamed body over %d bytes",
                                   scope["method"], scope["path"], limit)
                    raise HTTPException(status_code=413, detail="Request body too large")
            return message

        await self.app(scope, limited_receive, send)


app.add_middleware(BodySizeLimit)


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code,
                        headers=getattr(exc, "headers", None))


@app.exception_handler(QuotationError)
def quotation_error_handler(request: Request, exc: QuotationError):
    if exc.status_code >= 500:
        logger.error("Quotation generation failed on %s: %s", request.url.path, exc.detail or exc)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client-input errors: 400 with the {error} shape."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return quotation_error_handler(request, ValidationError("Invalid request: " + "; ".join(problems)))


# API routes
app.include_router(quotation.router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse({"error": "Failed to generate PDF"}, status_code=500)
