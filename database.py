from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
import logging

from config import settings

# Keep SQLAlchemy engine logging quiet; SQL echo is controlled separately
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

DATABASE_URL = settings.DATABASE_URL

# Only echo SQL queries in development with DEBUG on
ECHO_SQL = (settings.ENVIRONMENT == "development" and settings.DEBUG)

logger = logging.getLogger(__name__)


def build_engine_options(database_url: str) -> dict:
    """
    Engine keyword arguments for the given database URL.
    SQLite (used in tests) does not take the queue pool settings.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    connect_args = {}
    if "postgresql" in database_url.lower() and settings.DB_SSL:
        # asyncpg SSL mode for managed PostgreSQL (RDS etc.)
        connect_args["ssl"] = "require"
    elif "mysql" in database_url.lower():
        # Support full UTF-8 in names and free-text details
        connect_args["charset"] = "utf8mb4"

    options = {
        "pool_pre_ping": settings.DB_POOL_PRE_PING,  # Test connections before using them
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }
    if connect_args:
        options["connect_args"] = connect_args
    return options


try:
    engine = create_async_engine(
        DATABASE_URL,
        echo=ECHO_SQL,
        future=True,
        **build_engine_options(DATABASE_URL),
    )
    logger.info(f"Database engine created for {engine.url.get_backend_name()}")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}", exc_info=True)
    raise

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()

# Dependency for FastAPI routes
async def get_db():
    """
    Dependency function to get database session
    Usage in FastAPI routes:
        async def my_route(db: AsyncSession = Depends(get_db)):

    The session is committed after the route returns, rolled back on error
    and always closed so the connection goes back to the pool.
    """
    session = None
    try:
        session = AsyncSessionLocal()
        yield session
        await session.commit()
    except Exception as e:
        if session:
            await session.rollback()
        logger.error(f"Database error in session: {str(e)}", exc_info=True)
        raise
    finally:
        if session:
            try:
                await session.close()
            except Exception as close_error:
                logger.warning(f"Error closing session: {close_error}")

# Alias for consistency
get_async_session = get_db
