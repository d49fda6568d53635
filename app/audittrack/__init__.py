import logging
import os
import uuid

from flask import Flask, g, request
from dotenv import load_dotenv

from app.audittrack.config import load_config
from app.audittrack.db import init_db, teardown_db_session
from app.audittrack.routes import bp as routes_bp
from app.audittrack.modules.companies.admin import bp as companies_bp
from app.audittrack.modules.companies.store import StoreError
from app.audittrack.modules.analytics.admin import bp as analytics_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    if not app.config.get("GEMINI_API_KEY"):
        app.logger.warning("GEMINI_API_KEY not set; follow-up email drafts will return a fallback message.")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(companies_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api")

    @app.before_request
    def _assign_request_id():
        # Per-request id for audit/log correlation.
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    app.teardown_appcontext(teardown_db_session)

    @app.errorhandler(StoreError)
    def _err_store(e):  # type: ignore[no-redef]
        app.logger.error("Store unavailable (request_id=%s): %s", getattr(g, "request_id", None), e)
        return {"ok": False, "error": "Veritabanı bağlantısı yok. Lütfen daha sonra tekrar deneyin."}, 503

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return {"ok": False, "error": "Not found."}, 404

    @app.errorhandler(405)
    def _err_405(e):  # type: ignore[no-redef]
        return {"ok": False, "error": "Method not allowed."}, 405

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        # Ensure stack trace shows in logs.
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return {"ok": False, "error": "Internal server error."}, 500

    # Startup logging
    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
