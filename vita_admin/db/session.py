from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vita_admin.core.config.settings import get_settings

# Create engine
engine = create_async_engine(get_settings().DATABASE_URL, future=True)

# Create session
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Dependency
async def get_db():
    async with SessionLocal() as db:
        yield db

def get_session_factory() -> async_sessionmaker:
    """Session factory for work that needs more than the request session."""
    return SessionLocal
