import sys
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.infrastructure.config import CORS_ORIGINS, LOG_LEVEL
from app.infrastructure.db.session import Base, engine
from app.infrastructure.db import models  # noqa: F401  (registers the tables)
from app.presentation.api.routers.admin_router import router as admin_router
from app.presentation.api.routers.chat_router import router as chat_router
from app.presentation.api.routers.dashboard_router import router as dashboard_router
from app.presentation.api.routers.game_router import router as game_router
from app.presentation.api.routers.lesson_router import router as lesson_router
from app.presentation.api.routers.question_router import router as question_router
from app.presentation.api.routers.subject_router import router as subject_router
from app.presentation.dependencies import get_game_manager

# Create tables
Base.metadata.create_all(bind=engine)

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Pending game timers must not outlive the process
    get_game_manager().discard_all()


# Initialize FastAPI app
app = FastAPI(title="StudyForge API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred."}
    )

# Include routers
app.include_router(subject_router)
app.include_router(question_router)
app.include_router(lesson_router)
app.include_router(game_router)
app.include_router(dashboard_router)
app.include_router(admin_router)
app.include_router(chat_router)


# Optional root endpoint
@app.get("/")
def root():
    return {"message": "Welcome to StudyForge API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
