from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from taskline.database import Base, engine
from taskline.errors import TaskLineError
from taskline.logging_config import get_logger, setup_logging
from taskline.models import task as _task_models, user as _user_models  # noqa: F401  register tables
from taskline.routers import auth, nodes, tasks

setup_logging()
logger = get_logger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="TaskLine")

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(nodes.router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(TaskLineError)
async def taskline_exception_handler(request: Request, exc: TaskLineError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Missing or malformed request fields are client input errors, reported like
# any other ValidationError
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{field}: {message}" if field else message
    return JSONResponse(status_code=400, content={"detail": detail})


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
