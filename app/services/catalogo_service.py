"""Lecturas públicas del catálogo. Toda lectura exige fila activa y carrera activa."""
from collections import defaultdict

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.database import transaccion
from app.core.errores import NoEncontrado
from app.models.administrador import Administrador
from app.models.carrera import AdminCarrera, Carrera
from app.models.correlatividad import Correlatividad
from app.models.horario import Horario
from app.models.materia import Materia
from app.models.tipos import EstadoRegistro, EstadoRequisito, Rol, TipoCorrelatividad
from app.services.consultas import materia_visible
from app.services.horario_service import ordenar_horarios
from app.services.plan_estudio_pdf import FilaPlan, PlanEstudio

MateriaRequisito = aliased(Materia, name="materia_requisito")
MateriaPrincipal = aliased(Materia, name="materia_principal")


def _materias_visibles():
    return select(Materia).join(Carrera, Carrera.id == Materia.id_carrera).where(materia_visible())


async def listar_carreras_activas(db: AsyncSession) -> list[Carrera]:
    q = select(Carrera).where(Carrera.estado == EstadoRegistro.ACTIVO).order_by(Carrera.nombre)
    return list((await db.execute(q)).scalars().all())


async def obtener_carrera_activa(db: AsyncSession, id_carrera: int) -> Carrera:
    carrera = await db.get(Carrera, id_carrera)
    if carrera is None or carrera.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado("Carrera no encontrada.")
    return carrera


async def coordinador_activo(db: AsyncSession, id_carrera: int) -> Administrador | None:
    q = (
        select(Administrador)
        .join(AdminCarrera, AdminCarrera.id_administrador == Administrador.id)
        .where(
            AdminCarrera.id_carrera == id_carrera,
            Administrador.rol == Rol.COORDINADOR,
            Administrador.estado == EstadoRegistro.ACTIVO,
        )
    )
    return (await db.execute(q)).scalars().first()


async def anios_de_carrera(db: AsyncSession, id_carrera: int) -> list[int]:
    q = (
        select(Materia.anio)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .where(Materia.id_carrera == id_carrera, materia_visible())
        .distinct()
        .order_by(Materia.anio)
    )
    return list((await db.execute(q)).scalars().all())


async def materias_de_carrera(
    db: AsyncSession, id_carrera: int, anio: int | None = None
) -> list[Materia]:
    q = _materias_visibles().where(Materia.id_carrera == id_carrera)
    if anio is not None:
        q = q.where(Materia.anio == anio)
    q = q.order_by(Materia.anio, Materia.nombre)
    return list((await db.execute(q)).scalars().all())


async def materias_por_anio(db: AsyncSession, anio: int) -> list[Materia]:
    q = _materias_visibles().where(Materia.anio == anio).order_by(Materia.nombre)
    return list((await db.execute(q)).scalars().all())


async def buscar_materias(db: AsyncSession, nombre: str) -> list[Materia]:
    patron = f"%{nombre.lower()}%"
    q = _materias_visibles().where(func.lower(Materia.nombre).like(patron)).order_by(Materia.nombre)
    return list((await db.execute(q)).scalars().all())


async def obtener_materia_visible(db: AsyncSession, id_materia: int) -> Materia:
    q = _materias_visibles().where(Materia.id == id_materia)
    materia = (await db.execute(q)).scalars().first()
    if materia is None:
        raise NoEncontrado("Materia no encontrada.")
    return materia


async def horarios_de_materia(db: AsyncSession, id_materia: int) -> list[Horario]:
    q = (
        select(Horario)
        .join(Materia, Materia.id == Horario.id_materia)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .where(
            Horario.id_materia == id_materia,
            Horario.estado == EstadoRegistro.ACTIVO,
            materia_visible(),
        )
    )
    return ordenar_horarios((await db.execute(q)).scalars().all())


async def requisitos_de(
    db: AsyncSession, id_materia: int
) -> list[tuple[Materia, TipoCorrelatividad, EstadoRequisito]]:
    """Materias que `id_materia` requiere, con tipo y estado requerido."""
    q = (
        select(MateriaRequisito, Correlatividad.tipo, Correlatividad.estado_requisito)
        .join(Correlatividad, Correlatividad.id_materia_requisito == MateriaRequisito.id)
        .join(Carrera, Carrera.id == MateriaRequisito.id_carrera)
        .where(
            Correlatividad.id_materia == id_materia,
            Correlatividad.estado == EstadoRegistro.ACTIVO,
            MateriaRequisito.estado == EstadoRegistro.ACTIVO,
            Carrera.estado == EstadoRegistro.ACTIVO,
        )
        .order_by(MateriaRequisito.nombre)
    )
    return [tuple(fila) for fila in (await db.execute(q)).all()]


async def dependientes_de(
    db: AsyncSession, id_materia: int
) -> list[tuple[Materia, TipoCorrelatividad, EstadoRequisito]]:
    """Materias que exigen a `id_materia` como requisito."""
    q = (
        select(MateriaPrincipal, Correlatividad.tipo, Correlatividad.estado_requisito)
        .join(Correlatividad, Correlatividad.id_materia == MateriaPrincipal.id)
        .join(Carrera, Carrera.id == MateriaPrincipal.id_carrera)
        .where(
            Correlatividad.id_materia_requisito == id_materia,
            Correlatividad.estado == EstadoRegistro.ACTIVO,
            MateriaPrincipal.estado == EstadoRegistro.ACTIVO,
            Carrera.estado == EstadoRegistro.ACTIVO,
        )
        .order_by(MateriaPrincipal.nombre)
    )
    return [tuple(fila) for fila in (await db.execute(q)).all()]


async def detalle_materia(db: AsyncSession, id_materia: int) -> dict:
    """Materia con requisitos separados (cursar aprobada / cursar regular / rendir) y horarios."""
    materia = await obtener_materia_visible(db, id_materia)
    detalle = {
        "materia": materia,
        "requisitos_cursar_aprobada": [],
        "requisitos_cursar_regular": [],
        "requisitos_rendir": [],
        "horarios": await horarios_de_materia(db, id_materia),
    }
    for requerida, tipo, estado_req in await requisitos_de(db, id_materia):
        item = {"id": requerida.id, "nombre": requerida.nombre, "estado_requisito": estado_req}
        if tipo == TipoCorrelatividad.RENDIR:
            detalle["requisitos_rendir"].append(item)
        elif estado_req == EstadoRequisito.APROBADA:
            detalle["requisitos_cursar_aprobada"].append(item)
        else:
            detalle["requisitos_cursar_regular"].append(item)
    return detalle


async def registrar_vista(db: AsyncSession, id_materia: int) -> None:
    await obtener_materia_visible(db, id_materia)
    async with transaccion(db):
        await db.execute(
            update(Materia).where(Materia.id == id_materia).values(vistas=Materia.vistas + 1)
        )


async def destacadas(db: AsyncSession, limite: int) -> tuple[list[Materia], list[tuple[Horario, Materia]]]:
    """Las `limite` materias más vistas y sus horarios activos."""
    q = _materias_visibles().order_by(Materia.vistas.desc(), Materia.id).limit(limite)
    materias = list((await db.execute(q)).scalars().all())
    if not materias:
        return [], []
    por_id = {m.id: m for m in materias}
    q_h = select(Horario).where(
        Horario.id_materia.in_(list(por_id)), Horario.estado == EstadoRegistro.ACTIVO
    )
    horarios = ordenar_horarios((await db.execute(q_h)).scalars().all())
    return materias, [(h, por_id[h.id_materia]) for h in horarios]


async def obtener_plan_estudio(db: AsyncSession, id_carrera: int) -> PlanEstudio:
    """Datos del plan: materias activas por año y sus correlativas activas agrupadas."""
    carrera = await obtener_carrera_activa(db, id_carrera)
    q = (
        select(Materia)
        .where(Materia.id_carrera == id_carrera, Materia.estado == EstadoRegistro.ACTIVO)
        .order_by(Materia.anio, Materia.id)
    )
    materias = list((await db.execute(q)).scalars().all())
    plan = PlanEstudio(
        nombre_carrera=carrera.nombre,
        duracion=carrera.duracion,
        modalidad=carrera.modalidad,
        anio_aprobacion=carrera.anio_aprobacion,
    )
    if not materias:
        return plan

    q_c = (
        select(Correlatividad)
        .join(MateriaRequisito, MateriaRequisito.id == Correlatividad.id_materia_requisito)
        .join(Carrera, Carrera.id == MateriaRequisito.id_carrera)
        .where(
            Correlatividad.id_materia.in_([m.id for m in materias]),
            Correlatividad.estado == EstadoRegistro.ACTIVO,
            MateriaRequisito.estado == EstadoRegistro.ACTIVO,
            Carrera.estado == EstadoRegistro.ACTIVO,
        )
        .order_by(Correlatividad.id_materia_requisito)
    )
    por_materia: dict[int, list[Correlatividad]] = defaultdict(list)
    for c in (await db.execute(q_c)).scalars().all():
        por_materia[c.id_materia].append(c)

    for m in materias:
        fila = FilaPlan(
            id=m.id,
            nombre=m.nombre,
            campo_formacion=m.campo_formacion,
            formato=m.formato,
            modalidad=m.modalidad,
            horas_semanales=m.horas_semanales,
            total_horas_anuales=m.total_horas_anuales,
            acreditacion=m.acreditacion,
        )
        for c in por_materia[m.id]:
            if c.tipo == TipoCorrelatividad.CURSAR and c.estado_requisito == EstadoRequisito.APROBADA:
                fila.cursar_aprobada.append(c.id_materia_requisito)
            elif c.tipo == TipoCorrelatividad.CURSAR:
                fila.cursar_regular.append(c.id_materia_requisito)
            elif c.estado_requisito == EstadoRequisito.APROBADA:
                fila.rendir_aprobada.append(c.id_materia_requisito)
        plan.materias_por_anio.setdefault(m.anio, []).append(fila)
    return plan
