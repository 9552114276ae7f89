from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from valet_api.config import Config
from valet_api.database import build_engine, init_db
from valet_api.utils.dispatch_queue import DispatchQueue
from valet_api.views.auth_view import router as auth_router
from valet_api.views.parking_view import router as parking_router
from valet_api.views.request_view import router as request_router
import uvicorn
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_db(app.state.engine)
        logger.info("Database Initialized Successfully")

        queue = app.state.queue
        if queue.enabled:
            if queue.ping():
                logger.info("Connected to Redis successfully")
            else:
                logger.error("Failed to connect to Redis")

    except Exception as e:
        logger.error(f"Failed to initialized the database {e}")
        raise
    yield
    app.state.engine.dispose()


def create_app(config: Optional[Config] = None, queue: Optional[DispatchQueue] = None) -> FastAPI:
    config = config or Config.from_env()

    app = FastAPI(title="Smart Parking API", lifespan=lifespan)
    app.state.config = config
    app.state.engine = build_engine(config)
    app.state.queue = queue or DispatchQueue.from_url(config.redis_url, Config.QUEUE_KEY)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(parking_router)
    app.include_router(auth_router)
    app.include_router(request_router)
    return app


def run():
    config = Config.from_env()
    logger.info(f"Server running on port {config.port}")
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    run()
