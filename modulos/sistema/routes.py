"""Rotas de diagnóstico: health check, presença de configuração e contagens."""

import os
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from config_db import detect_db_type, mask_database_url
from email_service import mail_configured
from errors import StoreUnavailableError
from record_store import get_stores

sistema_bp = Blueprint("sistema", __name__)

# Variáveis cuja presença (nunca o valor) é reportada
ENV_VARS = (
    "DATABASE_URL",
    "DB_HOST",
    "SQLITE_PATH",
    "MAIL_SERVER",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
    "BREVO_API_KEY",
    "APP_BASE_URL",
    "SECRET_KEY",
)


def _presence(value) -> str:
    return "DEFINIDA" if value else "NÃO DEFINIDA"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@sistema_bp.route("/api/health", methods=["GET"])
def health():
    stores = get_stores()
    health_status = {
        "status": "OK",
        "timestamp": _timestamp(),
        "server": {"environment": current_app.config.get("APP_ENV")},
        "database": {"configured": stores.configured, "connected": False},
        "environment": {
            "database_url": _presence(stores.configured),
            "mail": _presence(mail_configured(current_app)),
        },
    }

    if not stores.configured:
        health_status["status"] = "ERROR"
        health_status["database"]["connection_error"] = "Database não configurada"
        return jsonify(health_status)

    try:
        stores.ping()
        health_status["database"]["connected"] = True
        health_status["database"]["ping"] = "OK"
    except StoreUnavailableError:
        current_app.logger.warning("Health check: ping no banco falhou")
        health_status["database"]["ping"] = "ERROR"
        health_status["status"] = "DEGRADED"
    return jsonify(health_status)


@sistema_bp.route("/api/debug-env", methods=["GET"])
def debug_env():
    return jsonify({
        "environment": {name.lower(): _presence(os.getenv(name)) for name in ENV_VARS},
        "database_configured": _presence(current_app.config.get("SQLALCHEMY_DATABASE_URI")),
        "timestamp": _timestamp(),
    })


@sistema_bp.route("/api/debug-db", methods=["GET"])
def debug_db():
    stores = get_stores()
    database_url = current_app.config.get("SQLALCHEMY_DATABASE_URI")
    debug_info = {
        "timestamp": _timestamp(),
        "database": {
            "configured": stores.configured,
            "connected": False,
            "type": detect_db_type(database_url),
            "url": mask_database_url(database_url),
        },
        "environment": {
            "database_url": _presence(os.getenv("DATABASE_URL")),
            "app_env": current_app.config.get("APP_ENV"),
        },
    }
    if not stores.configured:
        return jsonify(debug_info)

    try:
        stores.ping()
    except StoreUnavailableError:
        current_app.logger.warning("Debug DB: ping no banco falhou")
        debug_info["database"]["ping"] = "ERROR"
        return jsonify(debug_info)

    debug_info["database"]["connected"] = True
    debug_info["database"]["ping"] = "OK"
    try:
        debug_info["database"]["tables"] = sorted(inspect(stores.database.engine).get_table_names())
    except SQLAlchemyError as e:
        debug_info["database"]["operation_error"] = str(e)
    return jsonify(debug_info)


@sistema_bp.route("/api/teste", methods=["GET"])
def teste():
    stores = get_stores()
    if not stores.configured:
        raise StoreUnavailableError("Database não conectada")

    collections = stores.names()
    counts = {name: stores[name].count_documents() for name in collections}
    return jsonify({
        "success": True,
        "message": "Sistema funcionando corretamente",
        "timestamp": _timestamp(),
        "database": {
            "connected": True,
            "type": detect_db_type(current_app.config.get("SQLALCHEMY_DATABASE_URI")),
            "collections": collections,
            "documentCounts": counts,
        },
        "server": {"environment": current_app.config.get("APP_ENV")},
    })
