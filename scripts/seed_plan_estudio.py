"""Crea una carrera de ejemplo con materias, horarios y correlatividades.

Requiere haber ejecutado antes seed_administradores.py (asigna la carrera al
Coordinador de prueba). Es idempotente: lo que ya existe no se duplica.
"""
import asyncio
import sys
from datetime import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal, init_db
from app.models import (
    AdminCarrera,
    Administrador,
    Carrera,
    Correlatividad,
    DiaSemana,
    EstadoRequisito,
    Horario,
    Materia,
    TipoCorrelatividad,
)

CARRERA = {
    "nombre": "Tecnicatura Superior en Desarrollo de Software",
    "duracion": "3 años",
    "modalidad": "Presencial",
    "anio_aprobacion": 2022,
}
COORDINADOR = "Coordinador Sistemas"

# (nombre, año, campo de formación, formato, horas semanales, horas anuales, acreditación)
MATERIAS = [
    ("Programación I", 1, "Específica", "Asignatura", "6", "192", "Examen final"),
    ("Matemática", 1, "Fundamento", "Asignatura", "4", "128", "Examen final"),
    ("Inglés Técnico I", 1, "General", "Taller", "2", "64", "Promoción"),
    ("Programación II", 2, "Específica", "Asignatura", "6", "192", "Examen final"),
    ("Base de Datos", 2, "Específica", "Asignatura", "4", "128", "Examen final"),
    ("Práctica Profesionalizante I", 2, "Práctica", "Práctica", "4", "128", "Promoción"),
    ("Programación III", 3, "Específica", "Asignatura", "6", "192", "Examen final"),
    ("Práctica Profesionalizante II", 3, "Práctica", "Práctica", "6", "192", "Promoción"),
]

# (materia, requisito, tipo, estado requerido)
CORRELATIVIDADES = [
    ("Programación II", "Programación I", TipoCorrelatividad.CURSAR, EstadoRequisito.REGULAR),
    ("Programación II", "Programación I", TipoCorrelatividad.RENDIR, EstadoRequisito.APROBADA),
    ("Base de Datos", "Matemática", TipoCorrelatividad.CURSAR, EstadoRequisito.REGULAR),
    ("Programación III", "Programación II", TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA),
    ("Programación III", "Base de Datos", TipoCorrelatividad.CURSAR, EstadoRequisito.REGULAR),
    ("Práctica Profesionalizante II", "Práctica Profesionalizante I", TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA),
]

HORARIOS = [
    ("Programación I", DiaSemana.LUNES, time(18, 0), time(20, 0)),
    ("Programación I", DiaSemana.MIERCOLES, time(18, 0), time(22, 0)),
    ("Matemática", DiaSemana.MARTES, time(18, 0), time(22, 0)),
    ("Programación II", DiaSemana.JUEVES, time(18, 0), time(22, 0)),
    ("Base de Datos", DiaSemana.VIERNES, time(18, 0), time(22, 0)),
]


async def seed_plan_estudio():
    await init_db()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Carrera).where(Carrera.nombre == CARRERA["nombre"]))
        carrera = result.scalar_one_or_none()
        if not carrera:
            carrera = Carrera(**CARRERA)
            session.add(carrera)
            await session.flush()
            print(f"  + Carrera creada: {carrera.nombre} (id={carrera.id})")

        result = await session.execute(
            select(Administrador).where(Administrador.nombre == COORDINADOR)
        )
        coordinador = result.scalar_one_or_none()
        asignada = await session.get(AdminCarrera, (coordinador.id, carrera.id)) if coordinador else None
        if coordinador and not asignada:
            ocupada = await session.execute(
                select(AdminCarrera).where(AdminCarrera.id_carrera == carrera.id)
            )
            if ocupada.scalar_one_or_none() is None:
                session.add(AdminCarrera(id_administrador=coordinador.id, id_carrera=carrera.id))
                print(f"  + Carrera asignada a {coordinador.nombre}")
        elif not coordinador:
            print(f"  ! No existe '{COORDINADOR}'; la carrera queda sin coordinador")

        materias: dict[str, Materia] = {}
        for nombre, anio, campo, formato, hs, total, acreditacion in MATERIAS:
            result = await session.execute(
                select(Materia).where(Materia.nombre == nombre, Materia.id_carrera == carrera.id)
            )
            materia = result.scalar_one_or_none()
            if not materia:
                materia = Materia(
                    nombre=nombre,
                    id_carrera=carrera.id,
                    anio=anio,
                    campo_formacion=campo,
                    modalidad=CARRERA["modalidad"],
                    formato=formato,
                    horas_semanales=hs,
                    total_horas_anuales=total,
                    acreditacion=acreditacion,
                )
                session.add(materia)
                await session.flush()
                print(f"  + Materia: {nombre} (id={materia.id})")
            materias[nombre] = materia

        for nombre, requisito, tipo, estado_req in CORRELATIVIDADES:
            result = await session.execute(
                select(Correlatividad).where(
                    Correlatividad.id_materia == materias[nombre].id,
                    Correlatividad.id_materia_requisito == materias[requisito].id,
                    Correlatividad.tipo == tipo,
                )
            )
            if result.scalar_one_or_none() is None:
                session.add(Correlatividad(
                    id_materia=materias[nombre].id,
                    id_materia_requisito=materias[requisito].id,
                    tipo=tipo,
                    estado_requisito=estado_req,
                ))
                print(f"  + Correlativa: {nombre} <- {requisito} ({tipo.value})")

        for nombre, dia, inicio, fin in HORARIOS:
            result = await session.execute(
                select(Horario).where(
                    Horario.id_materia == materias[nombre].id,
                    Horario.dia_semana == dia,
                    Horario.hora_inicio == inicio,
                )
            )
            if result.scalar_one_or_none() is None:
                session.add(Horario(
                    id_materia=materias[nombre].id, dia_semana=dia, hora_inicio=inicio, hora_fin=fin
                ))
                print(f"  + Horario: {nombre} {dia.value} {inicio:%H:%M}-{fin:%H:%M}")

        await session.commit()

    print("Listo.")


if __name__ == "__main__":
    asyncio.run(seed_plan_estudio())
