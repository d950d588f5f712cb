import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flightdesk.core.config import Settings, settings as default_settings
from flightdesk.core.log import setup_logging
from flightdesk.db.session import Storage
from flightdesk.api.v1.api import api_router

logger = logging.getLogger(__name__)

# CORS: use CORS_ORIGINS from env in production; default to localhost for dev
_default_origins = [
    "http://127.0.0.1:3000", "http://localhost:3000",
    "http://127.0.0.1:5173", "http://localhost:5173",
]


def create_app(storage: Storage | None = None, cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or default_settings
    app = FastAPI(title=cfg.APP_NAME)
    app.state.settings = cfg
    app.state.storage = storage or Storage(cfg=cfg)

    origins = [o.strip() for o in cfg.CORS_ORIGINS.split(",") if o.strip()] if cfg.CORS_ORIGINS else _default_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    if not cfg.mail_enabled:
        logger.info("mail not configured; booking confirmations are disabled")
    return app


setup_logging()
app = create_app()
