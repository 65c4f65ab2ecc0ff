"""Fixtures comunes: base SQLite en memoria, cliente HTTP y constructor de escenarios."""
from datetime import time

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.endpoints.auth import get_servicio_correo
from app.core.config import settings
from app.core.database import Base, get_db
from app.core.security import ServicioTokens, hash_password
from app.main import app
from app.models import (
    AdminCarrera,
    Administrador,
    Carrera,
    Correlatividad,
    DiaSemana,
    EstadoRegistro,
    EstadoRequisito,
    Horario,
    Materia,
    Rol,
    TipoCorrelatividad,
)
from app.services.alcance import Principal

PASSWORD = "Clave.Segura1"
_hash_cache: dict[str, str] = {}


def password_hash() -> str:
    # bcrypt es lento a propósito: un solo hash para todos los tests
    if PASSWORD not in _hash_cache:
        _hash_cache[PASSWORD] = hash_password(PASSWORD)
    return _hash_cache[PASSWORD]


class CorreoFalso:
    """Reemplaza al ServicioCorreo: guarda (destinatario, token) en memoria."""

    def __init__(self):
        self.enviados: list[tuple[str, str]] = []

    async def enviar_restablecimiento(self, destinatario: str, token: str) -> None:
        self.enviados.append((destinatario, token))


class Escenario:
    """Crea filas directamente en la base, cada una en su propia sesión confirmada."""

    def __init__(self, sesiones, tokens: ServicioTokens):
        self._sesiones = sesiones
        self.tokens = tokens

    async def _guardar(self, *entidades):
        async with self._sesiones() as s:
            s.add_all(entidades)
            await s.commit()
        return entidades[0] if len(entidades) == 1 else entidades

    async def admin(
        self,
        nombre: str,
        rol: Rol = Rol.COORDINADOR,
        estado: EstadoRegistro = EstadoRegistro.ACTIVO,
        email: str | None = None,
        telefono: str | None = None,
    ) -> Administrador:
        return await self._guardar(Administrador(
            nombre=nombre,
            email=email,
            telefono=telefono,
            password_hash=password_hash(),
            rol=rol,
            estado=estado,
        ))

    async def rector(self, nombre: str = "Rector") -> Administrador:
        return await self.admin(nombre, Rol.RECTOR, email="rector@instituto.edu")

    async def carrera(
        self,
        nombre: str,
        coordinador: Administrador | None = None,
        estado: EstadoRegistro = EstadoRegistro.ACTIVO,
        **datos,
    ) -> Carrera:
        carrera = await self._guardar(Carrera(nombre=nombre, estado=estado, **datos))
        if coordinador is not None:
            await self._guardar(
                AdminCarrera(id_administrador=coordinador.id, id_carrera=carrera.id)
            )
        return carrera

    async def materia(
        self,
        carrera: Carrera,
        nombre: str,
        anio: int = 1,
        estado: EstadoRegistro = EstadoRegistro.ACTIVO,
        **datos,
    ) -> Materia:
        return await self._guardar(Materia(
            nombre=nombre, id_carrera=carrera.id, anio=anio, estado=estado, vistas=0, **datos
        ))

    async def horario(
        self,
        materia: Materia,
        dia: DiaSemana,
        inicio: time,
        fin: time,
        estado: EstadoRegistro = EstadoRegistro.ACTIVO,
    ) -> Horario:
        return await self._guardar(Horario(
            id_materia=materia.id, dia_semana=dia, hora_inicio=inicio, hora_fin=fin, estado=estado
        ))

    async def correlatividad(
        self,
        materia: Materia,
        requisito: Materia,
        tipo: TipoCorrelatividad = TipoCorrelatividad.CURSAR,
        estado_requisito: EstadoRequisito = EstadoRequisito.REGULAR,
    ) -> Correlatividad:
        return await self._guardar(Correlatividad(
            id_materia=materia.id,
            id_materia_requisito=requisito.id,
            tipo=tipo,
            estado_requisito=estado_requisito,
        ))

    def headers(self, admin: Administrador) -> dict[str, str]:
        token = self.tokens.crear_token_acceso(subject=admin.id, extra={"rol": admin.rol.value})
        return {"Authorization": f"Bearer {token}"}

    async def recargar(self, modelo, id_):
        async with self._sesiones() as s:
            return await s.get(modelo, id_)

    async def contar(self, modelo, *condiciones) -> int:
        async with self._sesiones() as s:
            q = select(func.count()).select_from(modelo).where(*condiciones)
            return (await s.execute(q)).scalar_one()

    async def asignaciones(self) -> set[tuple[int, int]]:
        async with self._sesiones() as s:
            result = await s.execute(select(AdminCarrera.id_administrador, AdminCarrera.id_carrera))
            return {tuple(fila) for fila in result.all()}


def principal_de(admin: Administrador) -> Principal:
    return Principal(id=admin.id, nombre=admin.nombre, rol=admin.rol, estado=admin.estado)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _activar_claves_foraneas(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sesiones(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(sesiones):
    async with sesiones() as session:
        yield session


@pytest.fixture
def tokens():
    return ServicioTokens(settings)


@pytest.fixture
def esc(sesiones, tokens):
    return Escenario(sesiones, tokens)


@pytest.fixture
def correo():
    return CorreoFalso()


@pytest.fixture
async def client(sesiones, correo):
    async def _get_db():
        async with sesiones() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_servicio_correo] = lambda: correo
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
