"""Punto de entrada de la aplicación FastAPI."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import settings
from app.core.database import init_db
from app.core.errores import ErrorAplicacion
from app.models import *  # noqa: F401, F403 - Registra modelos en Base.metadata antes de init_db

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Documentación Swagger: disponible en /docs (OpenAPI 3.0)
OPENAPI_TAGS = [
    {
        "name": "auth",
        "description": "Autenticación: login con nombre o correo, registro inicial y restablecimiento de contraseña.",
    },
    {
        "name": "api",
        "description": "Endpoints generales de la API v1. Incluye el perfil del administrador autenticado.",
    },
    {
        "name": "admin: carreras",
        "description": "Alta, edición, cierre y baja de carreras. Asignación del coordinador.",
    },
    {
        "name": "admin: materias",
        "description": "Materias dentro del alcance del administrador.",
    },
    {
        "name": "admin: horarios",
        "description": "Horarios de cursado de cada materia.",
    },
    {
        "name": "admin: correlatividades",
        "description": "Correlatividades (requisitos para cursar y para rendir).",
    },
    {
        "name": "admin: usuarios",
        "description": "Administradores: Rector y Coordinadores.",
    },
    {
        "name": "catalogo",
        "description": "Catálogo público: carreras, materias, horarios, destacadas y plan de estudio en PDF.",
    },
    {
        "name": "chatbot",
        "description": "Asistente conversacional con respuestas en markdown.",
    },
    {
        "name": "salud",
        "description": "Comprobación del estado del servicio.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestiona el ciclo de vida: inicio y cierre de la aplicación."""
    await init_db()
    logger.info("Base de datos inicializada")
    yield


app = FastAPI(
    title=settings.app_name,
    description="""
API REST del **Catálogo Académico**: administración de carreras, materias, horarios y
correlatividades por parte del Rector y los Coordinadores, y consulta pública del catálogo.

## Cómo usar la documentación (Swagger)

- **Swagger UI:** [GET /docs](/docs)
- **ReDoc:** [GET /redoc](/redoc)
- **OpenAPI JSON:** [GET /openapi.json](/openapi.json)

## Autenticación

1. Obtén un token con **POST /api/v1/auth/login** (nombre o correo, y contraseña).
2. En Swagger UI, clic en **Authorize** y pega solo el `access_token`.

## Errores

Los errores de negocio responden `{"detail": ..., "tipo": ..., "motivo": ...}`.
`motivo` distingue, por ejemplo, `inexistente` de `ya_inactivo` en un 404, o
`fuera_de_alcance` de `autoproteccion` en un 403.
""",
    version="0.1.0",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True, "tryItOutEnabled": True},
)


def custom_openapi():
    """Asegura que el esquema de seguridad Bearer tenga descripción en Swagger."""
    from fastapi.openapi.utils import get_openapi
    if app.openapi_schema is not None:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=app.openapi_tags,
    )
    schemes = openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    for scheme in schemes.values():
        if scheme.get("type") == "http" and scheme.get("scheme") == "bearer":
            scheme["description"] = "Pegue aquí el access_token obtenido en POST /api/v1/auth/login (solo el token, sin 'Bearer')"
            break
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ErrorAplicacion)
async def error_aplicacion_handler(request: Request, exc: ErrorAplicacion):
    logger.info(
        "%s %s -> %d %s %s",
        request.method, request.url.path, exc.status_code, exc.tipo,
        exc.motivo or "",
    )
    return JSONResponse(status_code=exc.status_code, content=exc.a_respuesta())


@app.exception_handler(Exception)
async def error_no_controlado_handler(request: Request, exc: Exception):
    logger.exception("Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Error interno del servidor", "tipo": "interno"},
    )


app.include_router(api_router, prefix="/api/v1")


@app.get(
    "/health",
    tags=["salud"],
    summary="Estado del servicio",
    response_description="Indica que la API está en ejecución",
)
async def health_check():
    """Comprueba que el servicio está activo. No requiere autenticación."""
    return {"status": "ok", "message": "Servicio en ejecución"}
