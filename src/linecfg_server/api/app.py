"""FastAPI application factory exposing one registry over HTTP.

Endpoints: /health, /config, /schema, /values[/{kind}/{id}],
/defaults, /read, /write.
"""
from __future__ import annotations

from fastapi import FastAPI

from linecfg import Registry, __version__
from linecfg.config import get_config
from linecfg_server.api.routes.values import router as values_router


def create_app(registry: Registry | None = None) -> FastAPI:
    """Build the app; without ``registry`` the process-wide one is used."""
    app = FastAPI(
        title="linecfg API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.registry = registry

    @app.get("/health")
    def health():  # noqa: D401
        return {"status": "ok"}

    @app.get("/config")
    def config():  # noqa: D401
        reg = app.state.registry
        if reg is not None:
            return {
                "path": str(reg.path),
                "max_line": reg.max_line,
                "scan_mode": reg.scan_mode,
            }
        store_cfg = get_config().store
        return {
            "path": store_cfg.path,
            "max_line": store_cfg.max_line,
            "scan_mode": store_cfg.scan_mode,
        }

    app.include_router(values_router)
    return app


app = create_app()
