"""Esquemas para materias, horarios y correlatividades (administración)."""
from datetime import time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.tipos import DiaSemana, EstadoRegistro, EstadoRequisito, TipoCorrelatividad


class MateriaCreate(BaseModel):
    nombre: str = Field(min_length=1)
    id_carrera: int
    anio: int = Field(ge=1, le=10, description="Año de cursado")
    campo_formacion: str | None = None
    modalidad: str | None = None
    formato: str | None = None
    horas_semanales: str | None = Field(default=None, examples=["4"])
    total_horas_anuales: str | None = Field(default=None, examples=["128"])
    acreditacion: str | None = None


class MateriaUpdate(BaseModel):
    """Body parcial. Cambiar `id_carrera` exige alcance sobre la carrera de origen y la de destino."""

    nombre: str | None = Field(default=None, min_length=1)
    id_carrera: int | None = None
    anio: int | None = Field(default=None, ge=1, le=10)
    campo_formacion: str | None = None
    modalidad: str | None = None
    formato: str | None = None
    horas_semanales: str | None = None
    total_horas_anuales: str | None = None
    acreditacion: str | None = None


class MateriaItem(BaseModel):
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
    estado: EstadoRegistro
    vistas: int = 0


class HorarioCreate(BaseModel):
    id_materia: int
    dia_semana: DiaSemana
    hora_inicio: time
    hora_fin: time

    @model_validator(mode="after")
    def inicio_antes_de_fin(self) -> "HorarioCreate":
        if self.hora_inicio >= self.hora_fin:
            raise ValueError("hora_inicio debe ser anterior a hora_fin")
        return self


class HorarioUpdate(BaseModel):
    id_materia: int | None = None
    dia_semana: DiaSemana | None = None
    hora_inicio: time | None = None
    hora_fin: time | None = None


class HorarioItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_materia: int
    dia_semana: DiaSemana
    hora_inicio: time
    hora_fin: time
    estado: EstadoRegistro


class CorrelatividadCreate(BaseModel):
    id_materia: int = Field(description="Materia principal")
    id_materia_requisito: int = Field(description="Materia requerida")
    tipo: TipoCorrelatividad
    estado_requisito: EstadoRequisito


class CorrelatividadUpdate(BaseModel):
    id_materia: int | None = None
    id_materia_requisito: int | None = None
    tipo: TipoCorrelatividad | None = None
    estado_requisito: EstadoRequisito | None = None


class CorrelatividadItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_materia: int
    id_materia_requisito: int
    tipo: TipoCorrelatividad
    estado_requisito: EstadoRequisito
    estado: EstadoRegistro
