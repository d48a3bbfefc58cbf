"""
Erros da Aplicação - Taxonomia Centralizada
===========================================

Exceções levantadas pelos handlers e pelas stores. Cada classe carrega o
status HTTP correspondente; ``register_error_handlers`` converte tudo em
respostas JSON no formato ``{"success": false, "message": ...}``.
"""

import logging

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ErpError(Exception):
    """Base de todos os erros tratados pela API."""

    status_code = 500
    default_message = "Erro interno do servidor"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ErpError):
    status_code = 400
    default_message = "Dados inválidos"


class AuthenticationError(ErpError):
    status_code = 401
    default_message = "E-mail ou senha incorretos."


class NotFoundError(ErpError):
    status_code = 404
    default_message = "Registro não encontrado"


class ConflictError(ErpError):
    status_code = 409
    default_message = "Registro já cadastrado."


class DuplicateRecordError(ConflictError):
    """Violação de campo único detectada pela store."""


class ServiceUnavailableError(ErpError):
    status_code = 503
    default_message = "Serviço temporariamente indisponível. Tente novamente em alguns segundos."


class StoreUnavailableError(ServiceUnavailableError):
    """Banco não configurado ou inacessível."""


class MailUnavailableError(ServiceUnavailableError):
    default_message = "Serviço de e-mail indisponível no momento."


def _is_development(app: Flask) -> bool:
    return bool(app.debug) or app.config.get("APP_ENV") == "development"


def register_error_handlers(app: Flask) -> None:
    """Registra os handlers globais de erro da API."""

    @app.errorhandler(ErpError)
    def handle_erp_error(err: ErpError):
        if err.status_code >= 500:
            current_app.logger.warning("%s: %s", type(err).__name__, err.message)
        return jsonify({"success": False, "message": err.message}), err.status_code

    @app.errorhandler(404)
    @app.errorhandler(405)
    def handle_not_found(_):
        # Verbos não suportados também respondem como rota inexistente
        return jsonify({"success": False, "message": "Rota não encontrada"}), 404

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        if isinstance(err, HTTPException):
            return jsonify({"success": False, "message": err.description}), err.code
        current_app.logger.exception("Erro não tratado: %s", err)
        body = {"success": False, "message": "Erro interno do servidor"}
        if _is_development(current_app):
            body["error"] = str(err)
        return jsonify(body), 500
