"""
CRM System - API Backend

Start with:
    uvicorn crm_backend.server:app --host 0.0.0.0 --port 5000 --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from crm_backend import __version__
from crm_backend.config import client, db, PORT, CORS_ORIGINS

# Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("crm")

app = FastAPI(
    title="CRM System",
    description="Customers, sales, targets and team performance",
    version=__version__
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== ERROR RESPONSES ====================

@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content={"message": "Validation error", "errors": errors})


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_error(request: Request, exc: DuplicateKeyError):
    return JSONResponse(status_code=400, content={"message": "Validation error: duplicate value"})


@app.exception_handler(PyMongoError)
async def store_error(request: Request, exc: PyMongoError):
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Server error", "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


# ==================== ROUTES ====================

from crm_backend.routes import (  # noqa: E402
    auth,
    admin,
    customers,
    sales,
    payments,
    revenues,
    targets,
    performances,
    comments,
    audit_logs,
    notifications,
    settings,
    dashboard,
)

app.include_router(auth.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(sales.router, prefix="/api")
app.include_router(payments.router, prefix="/api")
app.include_router(revenues.router, prefix="/api")
app.include_router(targets.router, prefix="/api")
app.include_router(performances.router, prefix="/api")
app.include_router(comments.router, prefix="/api")
app.include_router(audit_logs.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
app.include_router(settings.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": "CRM System API",
        "version": __version__,
        "status": "running",
        "docs": "/docs"
    }


# ==================== LIFECYCLE ====================

@app.on_event("startup")
async def startup():
    logger.info(f"CRM API {__version__} starting")

    await db.users.create_index("email", unique=True)
    await db.users.create_index("id")
    await db.customers.create_index("agentID")
    await db.sales.create_index("agentID")
    await db.sales.create_index("customerID")
    await db.notifications.create_index("userID")
    await db.settings.create_index("userID", unique=True)

    logger.info("MongoDB indexes ready")


@app.on_event("shutdown")
async def shutdown_db_client():
    client.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
