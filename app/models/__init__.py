"""Modelos SQLAlchemy (tablas de la base de datos)."""
from app.models.tipos import (
    DiaSemana,
    EstadoRegistro,
    EstadoRequisito,
    Rol,
    TipoCorrelatividad,
)
from app.models.administrador import Administrador
from app.models.carrera import AdminCarrera, Carrera
from app.models.materia import Materia
from app.models.horario import Horario
from app.models.correlatividad import Correlatividad

__all__ = [
    "DiaSemana",
    "EstadoRegistro",
    "EstadoRequisito",
    "Rol",
    "TipoCorrelatividad",
    "Administrador",
    "AdminCarrera",
    "Carrera",
    "Materia",
    "Horario",
    "Correlatividad",
]
