from flask import Blueprint, current_app, jsonify, request

from modulos.autenticacao.login_backend import confirm_password_reset, process_login, request_password_reset
from modulos.autenticacao.register_backend import process_registration
from validation import get_json_body

autenticacao_bp = Blueprint("autenticacao", __name__)


@autenticacao_bp.route("/api/register", methods=["POST"])
def register():
    data = get_json_body()
    user = process_registration(data.get("nome"), data.get("email"), data.get("password"))
    current_app.logger.info("Usuário registrado: %s", user["email"])
    return jsonify({"success": True, "message": "Usuário registrado com sucesso!", "user": user})


@autenticacao_bp.route("/api/login", methods=["POST"])
def login():
    data = get_json_body()
    user = process_login(data.get("email"), data.get("password"))
    return jsonify({"success": True, "message": "Login bem-sucedido!", "user": user})


@autenticacao_bp.route("/api/reset-password", methods=["POST"])
def reset_password():
    data = get_json_body()
    base_url = current_app.config.get("APP_BASE_URL") or request.host_url.rstrip("/")
    request_password_reset(data.get("email"), base_url)
    return jsonify({"success": True, "message": "Link de recuperação enviado para seu e-mail!"})


@autenticacao_bp.route("/api/reset-password/confirm", methods=["POST"])
def reset_password_confirm():
    data = get_json_body()
    confirm_password_reset(data.get("token"), data.get("password"), data.get("confirm_password"))
    return jsonify({"success": True, "message": "Senha redefinida com sucesso! Faça login com sua nova senha."})
