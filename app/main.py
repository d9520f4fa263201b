import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.api.routes import attendance, fees, grading, quiz, students, timetable
from app.core.config import settings
from app.core.errors import CodedHTTPException, coded_exception_handler, unhandled_exception_handler
from app.core.logging_config import setup_logging
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.core.rate_limit import limiter
from app.db.database import Base, SessionLocal, engine

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    Base.metadata.create_all(bind=engine)

    if settings.seed_demo_data:
        from app.services.seed_service import seed_demo_data

        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()

    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    yield


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Student records, grading, attendance, fees, timetable, quizzes and student reports",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(CodedHTTPException, coded_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(students.router, prefix="/api")
app.include_router(grading.router, prefix="/api")
app.include_router(attendance.router, prefix="/api")
app.include_router(fees.router, prefix="/api")
app.include_router(timetable.router, prefix="/api")
app.include_router(quiz.router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "ok"}
