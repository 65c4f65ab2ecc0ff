"""Conexión asíncrona a PostgreSQL con SQLAlchemy 2.0."""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings
from app.core.errores import ErrorInterno, traducir_integridad


engine = create_async_engine(
    settings.database_url_async,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base para todos los modelos SQLAlchemy."""

    pass


async def get_db():
    """Dependencia para obtener una sesión de base de datos por request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaccion(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Unidad atómica: confirma si el bloque termina bien y revierte ante cualquier error.

    Los errores de integridad y de almacenamiento se traducen a la taxonomía
    de la aplicación después del rollback.
    """
    try:
        yield session
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise traducir_integridad(exc) from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        raise ErrorInterno("Error de almacenamiento. Se revirtieron los cambios.") from exc
    except BaseException:
        await session.rollback()
        raise


async def init_db():
    """Inicializa la base de datos (crear tablas si no existen)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
