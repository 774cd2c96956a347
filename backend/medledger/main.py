"""
MedLedger - Authorization-gated patient records ledger API.
Patients, credentialed providers and prescriptions, with patient-granted
prescribing rights.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import LedgerError, PrescriptionListOverflow
from .core.audit_middleware import AuditMiddleware
from .models import base
from .models import patient, provider, prescription  # noqa: F401  register tables
from .api import patients, providers, prescriptions
from .seed_demo import seed_demo_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    base.Base.metadata.create_all(bind=base.engine)
    if settings.SEED_DEMO_DATA:
        seed_demo_data()
        logger.info("Demo ledger data seeded")
    yield


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    content = {"error": exc.code, "detail": exc.detail}
    if isinstance(exc, PrescriptionListOverflow) and exc.prescription_id is not None:
        content["prescription_id"] = exc.prescription_id
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Patient health records, a directory of credentialed providers and "
            "a prescription ledger. Providers prescribe only for patients who "
            "have authorized them."
        ),
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(AuditMiddleware)
    app.add_exception_handler(LedgerError, ledger_error_handler)

    app.include_router(patients.router, prefix="/api/v1")
    app.include_router(providers.router, prefix="/api/v1")
    app.include_router(prescriptions.router, prefix="/api/v1")

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "MedLedger API", "version": settings.VERSION}

    return app


app = create_app()
