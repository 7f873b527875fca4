# coursefile/main.py

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger
import sys
import time
import psutil

from coursefile.core.database import test_connection, init_db, AsyncSessionLocal
from coursefile.core.config import settings
from coursefile.core.exceptions import CourseFileError
from coursefile.services.auth_service import get_user_by_email, create_user
from coursefile.models.user import UserRole

# Routers
from coursefile.api.endpoints import (
    auth as auth_router,
    users as users_router,
    academic as academic_router,
    templates as templates_router,
    assignments as assignments_router,
    submissions as submissions_router,
    hod as hod_router,
    logs as logs_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Course File Backend",
    version="1.0.0",
    description="Course-file tracking and approval service for the college academic app.",
)

START_TIME = time.time()
DB_STATUS = "Connecting..."


# ------------------------------------------------------------
# ERROR RESPONSES
# Every error carries a human-readable `message`; the mobile
# client shows it verbatim in an alert.
# ------------------------------------------------------------
@app.exception_handler(CourseFileError)
async def course_file_error_handler(request: Request, exc: CourseFileError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "detail": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=422,
        content={"message": message, "detail": jsonable_encoder(errors)},
    )


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        current_db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        logger.exception("Metrics: database ping failed")
        current_db_status = "Error"

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(academic_router.router)
app.include_router(templates_router.router)
app.include_router(assignments_router.router)
app.include_router(submissions_router.router)
app.include_router(hod_router.router)
app.include_router(logs_router.router)

# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    global DB_STATUS
    logger.info("Starting Course File Backend...")

    # 1) Database connection test
    try:
        await test_connection()
        DB_STATUS = "Connected"
        logger.success("Database connection established.")
    except Exception:
        DB_STATUS = "Error"
        logger.exception("Startup aborted: Database connection failed.")
        return

    # 2) Initialize database tables
    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    # 3) Seed Super Admin
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        logger.warning("Missing Super Admin credentials in settings.")
    else:
        try:
            async with AsyncSessionLocal() as session:
                existing = await get_user_by_email(session, settings.SUPER_ADMIN_EMAIL)
                if not existing:
                    logger.info(f"Seeding Super Admin: {settings.SUPER_ADMIN_EMAIL}")
                    await create_user(
                        session=session,
                        name=settings.SUPER_ADMIN_NAME or "Super Admin",
                        email=settings.SUPER_ADMIN_EMAIL,
                        password=settings.SUPER_ADMIN_PASSWORD,
                        role=UserRole.ADMIN,
                    )
                    logger.success("Super Admin created successfully.")
                else:
                    logger.info("Super Admin already exists. Skipping.")
        except Exception:
            logger.exception("Super Admin seeding failed.")

    logger.success("Backend startup completed successfully.")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "Course File Backend",
        "version": app.version,
        "database": DB_STATUS,
    }
