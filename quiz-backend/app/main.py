from fastapi import FastAPI
from .core.config import settings
from .core.cors import setup_cors
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .api.v1.routers import quizzes as quizzes_router

setup_logging()

app = FastAPI(title=settings.APP_NAME)
setup_cors(app)
register_exception_handlers(app)

app.include_router(quizzes_router.router, prefix=settings.API_V1_PREFIX)

@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
