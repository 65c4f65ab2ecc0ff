"""Enumeraciones y columnas compartidas por los modelos."""
import enum
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

# BIGINT en PostgreSQL; INTEGER en SQLite para que funcione el autoincremento.
IdGrande = BigInteger().with_variant(Integer, "sqlite")


def ahora() -> datetime:
    return datetime.now(timezone.utc)


def columna_enum(enum_cls: type[enum.Enum]) -> Enum:
    """Guarda el valor textual del enum (no el nombre del miembro)."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda miembros: [m.value for m in miembros],
    )


class Rol(str, enum.Enum):
    """Roles de administrador. Agregar un rol obliga a revisar `autorizacion`."""

    RECTOR = "Rector"
    COORDINADOR = "Coordinador"


class EstadoRegistro(str, enum.Enum):
    """Ciclo de vida común a todas las entidades."""

    ACTIVO = "activo"
    INACTIVO = "inactivo"
    CERRADO = "cerrado"  # solo carreras
    SUSPENDIDO = "suspendido"  # solo administradores


ESTADOS_CARRERA = frozenset({EstadoRegistro.ACTIVO, EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO})
ESTADOS_ADMINISTRADOR = frozenset(
    {EstadoRegistro.ACTIVO, EstadoRegistro.SUSPENDIDO, EstadoRegistro.INACTIVO}
)
ESTADOS_BASICOS = frozenset({EstadoRegistro.ACTIVO, EstadoRegistro.INACTIVO})


class DiaSemana(str, enum.Enum):
    LUNES = "Lunes"
    MARTES = "Martes"
    MIERCOLES = "Miércoles"
    JUEVES = "Jueves"
    VIERNES = "Viernes"
    SABADO = "Sábado"
    DOMINGO = "Domingo"

    @property
    def orden(self) -> int:
        return list(DiaSemana).index(self)


class TipoCorrelatividad(str, enum.Enum):
    CURSAR = "cursar"
    RENDIR = "rendir"


class EstadoRequisito(str, enum.Enum):
    APROBADA = "aprobada"
    REGULAR = "regular"


class AuditoriaMixin:
    """Estado del ciclo de vida y auditoría de la baja lógica."""

    estado: Mapped[EstadoRegistro] = mapped_column(
        columna_enum(EstadoRegistro), nullable=False, default=EstadoRegistro.ACTIVO
    )
    fecha_creacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=ahora
    )
    fecha_eliminacion: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    id_administrador_eliminacion: Mapped[int | None] = mapped_column(
        IdGrande, ForeignKey("administradores.id", ondelete="SET NULL"), nullable=True
    )
