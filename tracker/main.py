# main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from tracker.version import VERSION
from tracker.api import routes_auth, routes_shipments
from tracker.core.config import Settings, settings
from tracker.core.errors import register_exception_handlers
from tracker.core.logging_config import setup_logging
from tracker.store.json_store import JsonStore

log = logging.getLogger(__name__)


def create_app(cfg: Optional[Settings] = None, store: Optional[JsonStore] = None) -> FastAPI:
    cfg = cfg or settings

    app = FastAPI(title='Shipping Tracker', version=VERSION)
    app.state.settings = cfg
    if store is not None:
        app.state.store = store

    if cfg.METRICS_ENABLED:
        # Instrument the app BEFORE adding routes or middleware
        Instrumentator().instrument(app).expose(
            app,
            include_in_schema=False,
            endpoint=f"{cfg.API_PREFIX}/metrics",
            should_gzip=True,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    @app.get('/health')
    def health(): return {'status': 'ok'}

    @app.get(f'{cfg.API_PREFIX}/health')
    def api_health(): return {'status': 'ok'}

    @app.get('/v1/_info')
    def info(): return {'service': 'tracker', 'version': VERSION}

    @app.on_event("startup")
    async def startup_event():
        setup_logging(cfg.LOG_LEVEL)
        # opened here so importing the module touches no files
        if getattr(app.state, 'store', None) is None:
            app.state.store = JsonStore(cfg.DATA_FILE)
        for route in app.routes:
            if hasattr(route, "methods") and hasattr(route, "path"):
                log.info("%s %s", sorted(route.methods), route.path)

    app.include_router(routes_auth.router, prefix=cfg.API_PREFIX, tags=['auth'])
    app.include_router(routes_shipments.router, prefix=cfg.API_PREFIX, tags=['shipments'])
    return app


app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run("tracker.main:app", host=settings.HOST, port=settings.PORT)
