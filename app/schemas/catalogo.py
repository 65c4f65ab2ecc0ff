"""Esquemas de respuesta del catálogo público."""
from datetime import time

from pydantic import BaseModel, ConfigDict, Field

from app.models.tipos import DiaSemana, EstadoRequisito, TipoCorrelatividad


class CarreraResumen(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str


class CoordinadorContacto(BaseModel):
    nombre: str
    email: str | None = None
    telefono: str | None = None


class CarreraDetalle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    duracion: str | None = None
    modalidad: str | None = None
    anio_aprobacion: int | None = None
    coordinador: CoordinadorContacto | None = None


class MateriaResumen(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    id_carrera: int
    anio: int


class FranjaHoraria(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dia_semana: DiaSemana
    hora_inicio: time
    hora_fin: time


class Requisito(BaseModel):
    id: int
    nombre: str
    estado_requisito: EstadoRequisito


class Dependiente(BaseModel):
    """Materia que exige a otra como requisito."""

    id: int
    nombre: str
    anio: int
    tipo: TipoCorrelatividad
    estado_requisito: EstadoRequisito


class MateriaDetalle(BaseModel):
    """Materia con correlativas separadas por tipo y horarios ordenados."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    id_carrera: int
    anio: int
    campo_formacion: str | None = None
    modalidad: str | None = None
    formato: str | None = None
    horas_semanales: str | None = None
    total_horas_anuales: str | None = None
    acreditacion: str | None = None
    requisitos_cursar_aprobada: list[Requisito] = Field(default_factory=list)
    requisitos_cursar_regular: list[Requisito] = Field(default_factory=list)
    requisitos_rendir: list[Requisito] = Field(default_factory=list)
    horarios: list[FranjaHoraria] = Field(default_factory=list)


class HorarioDestacado(FranjaHoraria):
    id_materia: int
    nombre_materia: str


class DestacadasResponse(BaseModel):
    materias: list[MateriaResumen]
    horarios: list[HorarioDestacado]
