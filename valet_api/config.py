import os
from typing import Any, Dict, List, Optional
from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL, make_url


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    PORT = 5000
    DB_USER = "postgres"
    DB_PASSWORD = "password"
    DB_HOST = "localhost"
    DB_PORT = 5432
    DB_NAME = "smart_parking"
    QUEUE_KEY = "valet_queue"

    def __init__(
        self,
        database_url: Optional[str] = None,
        db_user: str = DB_USER,
        db_password: str = DB_PASSWORD,
        db_host: str = DB_HOST,
        db_port: int = DB_PORT,
        db_name: str = DB_NAME,
        port: int = PORT,
        redis_url: Optional[str] = None,
        strict_transitions: bool = False,
        sql_echo: bool = False,
        cors_origins: Optional[List[str]] = None,
    ):
        self.database_url = database_url
        self.db_user = db_user
        self.db_password = db_password
        self.db_host = db_host
        self.db_port = db_port
        self.db_name = db_name
        self.port = port
        self.redis_url = redis_url
        self.strict_transitions = strict_transitions
        self.sql_echo = sql_echo
        self.cors_origins = cors_origins or ["*"]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv(find_dotenv(usecwd=True))
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            db_user=os.getenv("DB_USER", cls.DB_USER),
            db_password=os.getenv("DB_PASSWORD", cls.DB_PASSWORD),
            db_host=os.getenv("DB_HOST", cls.DB_HOST),
            db_port=int(os.getenv("DB_PORT", cls.DB_PORT)),
            db_name=os.getenv("DB_NAME", cls.DB_NAME),
            port=int(os.getenv("PORT", cls.PORT)),
            redis_url=os.getenv("REDIS_URL") or None,
            strict_transitions=_env_flag("STRICT_TRANSITIONS"),
            sql_echo=_env_flag("SQL_ECHO"),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        )

    @property
    def is_remote(self) -> bool:
        return bool(self.database_url)

    def sqlalchemy_url(self) -> URL:
        # DATABASE_URL WINS OVER THE INDIVIDUAL DB_* VARIABLES
        if self.database_url:
            url = self.database_url
            # HOSTED PROVIDERS STILL HAND OUT THE OLD postgres:// SCHEME
            if url.startswith("postgres://"):
                url = "postgresql://" + url[len("postgres://"):]
            return make_url(url)

        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    def connect_args(self) -> Dict[str, Any]:
        url = self.sqlalchemy_url()
        if url.get_backend_name() == "sqlite":
            return {"check_same_thread": False}
        if self.is_remote and url.get_backend_name() == "postgresql" and "sslmode" not in url.query:
            return {"sslmode": "require"}
        return {}
