import logging
from fastapi import Request
from sqlmodel import create_engine, SQLModel, Session
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from valet_api.config import Config
from valet_api.models.valet_models import ValetRequest, User  # noqa: F401  REGISTERS THE TABLES
from valet_api.utils.dispatch_queue import DispatchQueue

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# COLUMNS OLDER DEPLOYMENTS OF THE requests TABLE WERE CREATED WITHOUT
LIFECYCLE_COLUMNS = ["valet_id", "valet_name", "parked_timestamp", "exit_timestamp", "spot_id"]


def build_engine(config: Config) -> Engine:
    url = config.sqlalchemy_url()
    kwargs = {"echo": config.sql_echo, "connect_args": config.connect_args()}

    # ONE SHARED CONNECTION OR EVERY SESSION WOULD SEE ITS OWN EMPTY IN-MEMORY DB
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)
    if url.get_backend_name() == "postgresql":
        logger.info(f"Using {'remote' if config.is_remote else 'local'} PostgreSQL")
    else:
        logger.info(f"Using {url.get_backend_name()} database")
    return engine


def patch_requests_table(engine: Engine) -> list:
    inspector = inspect(engine)
    if "requests" not in inspector.get_table_names():
        return []

    existing_columns = {column["name"] for column in inspector.get_columns("requests")}
    table = ValetRequest.__table__
    added = []

    with engine.begin() as connection:
        for name in LIFECYCLE_COLUMNS:
            if name in existing_columns:
                continue
            column_type = table.c[name].type.compile(dialect=engine.dialect)
            connection.execute(text(f"ALTER TABLE requests ADD COLUMN {name} {column_type}"))
            added.append(name)

    if added:
        logger.info(f"Patched requests table, added columns: {', '.join(added)}")
    return added


def init_db(engine: Engine):
    try:
        inspector = inspect(engine)
        existing_tables = inspector.get_table_names()

        # create_all ONLY ISSUES CREATE TABLE FOR THE MISSING ONES
        SQLModel.metadata.create_all(engine)
        missing = [name for name in SQLModel.metadata.tables if name not in existing_tables]
        if missing:
            logger.info(f"Tables created successfully: {', '.join(missing)}")
        else:
            logger.info("Tables already exist, skipping creation")

        patch_requests_table(engine)
    except Exception as e:
        logger.error(f"Error in initializing the database: {e}")
        raise


def get_db(request: Request):
    try:
        with Session(request.app.state.engine) as session:
            yield session
    # HTTP AND VALIDATION ERRORS ARE THROWN BACK IN HERE TOO, ONLY STORE FAILURES ARE LOGGED
    except SQLAlchemyError as e:
        logger.error(f"Error during database session: {e}")
        raise


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_queue(request: Request) -> DispatchQueue:
    return request.app.state.queue
