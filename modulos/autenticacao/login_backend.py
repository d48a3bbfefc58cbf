import logging
import secrets
from datetime import datetime, timedelta

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from email_service import mail_configured, send_password_reset
from errors import AuthenticationError, MailUnavailableError, NotFoundError, ValidationError
from modulos.autenticacao.register_backend import check_new_password
from record_store import get_stores

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(hours=1)


def public_user(user: dict) -> dict:
    return {"id": user["id"], "nome": user.get("nome"), "email": user["email"]}


def process_login(email: str | None, password: str | None) -> dict:
    email = (email or "").strip().lower()
    password = password or ""

    if not email or not password:
        raise ValidationError("Informe e-mail e senha.")

    user = get_stores()["users"].find_one({"email": email})
    if user is None or not check_password_hash(user["password_hash"], password):
        logger.info("Credenciais inválidas para %s", email)
        raise AuthenticationError()

    logger.info("Login bem-sucedido para %s", email)
    return public_user(user)


def request_password_reset(email: str | None, base_url: str) -> None:
    """Gera um token de uma hora e envia o link de redefinição por e-mail."""
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("Informe seu email.")

    stores = get_stores()
    user = stores["users"].find_one({"email": email})
    if user is None:
        raise NotFoundError("E-mail não encontrado.")

    app = current_app._get_current_object()
    if not mail_configured(app):
        logger.warning("Reset de senha pedido sem relay de e-mail configurado")
        raise MailUnavailableError()

    token = secrets.token_urlsafe(32)
    reset_id = stores["password_resets"].insert_one({
        "user_id": user["id"],
        "token": token,
        "expires_at": datetime.utcnow() + RESET_TOKEN_TTL,
        "is_used": False,
        "created_at": datetime.utcnow(),
    })

    reset_link = f"{base_url}/reset-password?token={token}"
    if not send_password_reset(email, reset_link, app, nome=user.get("nome")):
        # Token sem e-mail entregue não deve continuar válido
        stores["password_resets"].delete_one(reset_id)
        raise MailUnavailableError()


def confirm_password_reset(token: str | None, password: str | None, confirm: str | None) -> None:
    stores = get_stores()
    reset = stores["password_resets"].find_one({"token": (token or "").strip(), "is_used": False})
    if reset is None or reset["expires_at"] <= datetime.utcnow():
        raise ValidationError("Link inválido ou expirado. Solicite um novo link de recuperação.")

    password = password or ""
    check_new_password(password, confirm or "")

    stores["users"].update_one(reset["user_id"], {"password_hash": generate_password_hash(password)})
    stores["password_resets"].update_one(reset["id"], {"is_used": True})
    logger.info("Senha redefinida para o usuário %s", reset["user_id"])
