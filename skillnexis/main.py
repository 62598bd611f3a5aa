# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
import logging
import sys
import httpx
from skillnexis.config import settings
from skillnexis.deps import create_store
from skillnexis.logging_config import setup_logging
from skillnexis.middleware.error_handler import ErrorHandlerMiddleware
from skillnexis.middleware.exception_handlers import register_exception_handlers
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.repos.seed import seed_sample_data
from skillnexis.routers.health import router as health_router
from skillnexis.routers.user_auth import auth
from skillnexis.routers.courses_route import courses
from skillnexis.routers.student_progress import progress_route, quiz_route, certificates_route
from skillnexis.routers.admin_route import admin
from skillnexis.routers.contact_route import contact
from skillnexis.services import auth_service
from skillnexis.tasks.scheduler import create_scheduler, schedule_jobs


# Setup logging
log_level = "DEBUG" if settings.DEBUG else "INFO"
log_file = "logs/app.log" if settings.ENVIRONMENT == "production" else None
setup_logging(log_level=log_level, log_file=log_file)

logger = logging.getLogger(__name__)


app = FastAPI(
    title="SkillNexis API",
    description="SkillNexis e-learning platform: catalogue, progress, certificates and admin",
    version="1.0.0"
)


@app.on_event("startup")
async def startup():
    logger.info("Starting application...")

    try:
        app.state.store = create_store(settings)
        await run_in_threadpool(app.state.store.ping)
        await run_in_threadpool(app.state.store.ensure_indexes)
        logger.info(f"Store connection established ({settings.STORE_BACKEND})")
    except Exception as e:
        logger.critical(f"Failed to connect to {settings.STORE_BACKEND} store: {str(e)}")
        sys.exit(1)

    app.state.data_manager = AdminDataManager(app.state.store)

    if not auth_service.admin_login_configured():
        logger.warning("Neither ADMIN_PASSWORD nor ADMIN_PASSWORD_HASH is set; admin login is disabled")

    if settings.SEED_SAMPLE_DATA:
        try:
            seeded = await run_in_threadpool(seed_sample_data, app.state.data_manager)
            if seeded:
                logger.info("Sample courses and quizzes seeded")
        except ConnectionError as e:
            logger.error(f"Failed to seed sample data: {str(e)}")

    app.state.mail_client = httpx.AsyncClient(timeout=10.0)

    # Scheduler
    try:
        app.state.scheduler = create_scheduler()
        schedule_jobs(app.state.scheduler, app.state.data_manager)
        app.state.scheduler.start()
        logger.info("Scheduler started")
    except Exception as e:
        logger.error(f"Failed to start scheduler: {str(e)}")
        # Continue startup as this is not critical

    logger.info("Application startup completed successfully")

@app.on_event("shutdown")
async def shutdown():
    logger.info("Starting application shutdown...")

    try:
        if hasattr(app.state, 'scheduler'):
            app.state.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown completed")
    except Exception as e:
        logger.error(f"Error shutting down scheduler: {str(e)}")

    try:
        if hasattr(app.state, 'mail_client'):
            await app.state.mail_client.aclose()
    except Exception as e:
        logger.error(f"Error closing mail client: {str(e)}")

    try:
        if hasattr(app.state, 'store'):
            await run_in_threadpool(app.state.store.close)
            logger.info("Store connection closed")
    except Exception as e:
        logger.error(f"Error closing store connection: {str(e)}")

    logger.info("Application shutdown completed")

# Error handling middleware (should be first)
app.add_middleware(ErrorHandlerMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(health_router)
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(progress_route.router)
app.include_router(quiz_route.router)
app.include_router(certificates_route.router)
app.include_router(admin.router)
app.include_router(contact.router)
