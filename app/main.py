from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import routes
from routes import auth, users, franchises, orders

# Import database and configuration
from utils import config
from utils.auth import ensure_default_admin
from utils.database import Database

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the API. The database handle lives for the lifetime of the app."""
    logging.basicConfig(level=config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(database_url or config.DATABASE_URL)
        database.create_all()
        with database.session() as db:
            ensure_default_admin(db)
        app.state.db = database
        yield
        database.dispose()

    app = FastAPI(
        title="Pizza Ordering Service API",
        description="Authentication, franchise, store, menu and order management for a pizza chain",
        version=config.SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        openapi_tags=[
            {"name": "auth", "description": "Registration, login and logout"},
            {"name": "users", "description": "User account management"},
            {"name": "franchises", "description": "Franchise and store management"},
            {"name": "orders", "description": "Menu and order management"}
        ],
        swagger_ui_parameters={
            "persistAuthorization": True,
            "defaultModelsExpandDepth": -1
        }
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors are returned as {"message": ...}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid request')}" if field else first.get("msg", "invalid request")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "internal server error"},
        )

    # Include routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(franchises.router)
    app.include_router(orders.router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {"message": "welcome to the pizza service", "version": config.SERVICE_VERSION}

    return app


app = create_app()

# Main run block
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
