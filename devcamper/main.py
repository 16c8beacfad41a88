import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from devcamper.core.config import settings
from devcamper.core.errors import install_error_handlers
from devcamper.core.request_logging import install_request_logging
from devcamper.api.v1.router import router as v1_router
from devcamper.services.email_service import email_provider_health

logging.basicConfig(
    level=logging.DEBUG if settings.APP_ENV == "development" else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_logging(app)
install_error_handlers(app)

app.include_router(v1_router, prefix="/api/v1")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok", "email": email_provider_health()}
