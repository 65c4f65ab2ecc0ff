"""Crea un Rector y un Coordinador de prueba. Si ya existen, solo actualiza su contraseña."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal, init_db
from app.core.security import hash_password
from app.models import Administrador, EstadoRegistro, Rol

PASSWORD_PLAIN = "Cambiar.123"

ADMINISTRADORES = [
    {"nombre": "Rector", "email": "rector@instituto.edu", "rol": Rol.RECTOR},
    {"nombre": "Coordinador Sistemas", "email": "coord.sistemas@instituto.edu", "rol": Rol.COORDINADOR},
]


async def seed_administradores():
    await init_db()
    password_hash = hash_password(PASSWORD_PLAIN)
    async with AsyncSessionLocal() as session:
        for datos in ADMINISTRADORES:
            result = await session.execute(
                select(Administrador).where(Administrador.nombre == datos["nombre"])
            )
            administrador = result.scalar_one_or_none()
            if not administrador:
                administrador = Administrador(
                    nombre=datos["nombre"],
                    email=datos["email"],
                    password_hash=password_hash,
                    rol=datos["rol"],
                    estado=EstadoRegistro.ACTIVO,
                )
                session.add(administrador)
                await session.flush()
                print(f"  + {datos['rol'].value} creado: {datos['nombre']} (id={administrador.id})")
            else:
                administrador.password_hash = password_hash
                print(f"  = Existente, contraseña actualizada: {datos['nombre']}")

        await session.commit()

    print("Listo. Contraseña de ambos administradores: " + PASSWORD_PLAIN)


if __name__ == "__main__":
    asyncio.run(seed_administradores())
