"""
OGCS CRM - Location API

Start with:
    uvicorn server:app --host 0.0.0.0 --port 8001 --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import MONGO_URL, DB_NAME, CORS_ORIGINS, LOG_LEVEL, DAY_UTC_OFFSET_MINUTES
from database import MongoHandle, ensure_indexes

# Logging configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("ogcs_crm")

API_VERSION = "1.0.0"


def _invalid_fields(exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[1]) if len(loc) > 1 else str(loc[0] if loc else "body")
        if name not in fields:
            fields.append(name)
    return fields


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = _invalid_fields(exc)
        logger.info(f"[VALIDATION] {request.method} {request.url.path} fields={fields}")
        return JSONResponse(
            status_code=400,
            content={
                "detail": f"Invalid or missing field(s): {', '.join(fields)}",
                "fields": fields,
                "data": [],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "data": []},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"[UNHANDLED] {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "data": []},
        )


def create_app(mongo: MongoHandle = None) -> FastAPI:
    app = FastAPI(
        title="OGCS CRM",
        description="Employee location tracking for the OGCS CRM",
        version=API_VERSION
    )
    app.state.mongo = mongo or MongoHandle(MONGO_URL, DB_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ==================== ROUTES ====================

    from routes import auth, locations, admin_locations

    app.include_router(auth.router, prefix="/api")
    app.include_router(locations.router, prefix="/api")
    app.include_router(admin_locations.router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "name": "OGCS CRM API",
            "version": API_VERSION,
            "status": "running",
            "docs": "/docs"
        }

    # ==================== LIFECYCLE ====================

    @app.on_event("startup")
    async def startup():
        db = app.state.mongo.open()
        await ensure_indexes(db)
        logger.info(f"OGCS CRM started (day offset: {DAY_UTC_OFFSET_MINUTES} min)")

    @app.on_event("shutdown")
    async def shutdown():
        app.state.mongo.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
