from datetime import datetime

from werkzeug.security import generate_password_hash

from errors import ConflictError, ValidationError
from record_store import get_stores

MIN_PASSWORD_LENGTH = 6


def check_new_password(password: str, confirm: str | None = None) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Use uma senha com pelo menos {MIN_PASSWORD_LENGTH} caracteres.")
    if confirm is not None and password != confirm:
        raise ValidationError("As senhas não coincidem.")


def process_registration(nome: str | None, email: str | None, password: str | None) -> dict:
    """Cria o usuário e devolve ``{id, nome, email}`` (sem o hash da senha)."""
    nome = (nome or "").strip() or None
    email = (email or "").strip().lower()
    password = password or ""

    if not email or not password:
        raise ValidationError("Preencha todos os campos.")
    if "@" not in email:
        raise ValidationError("E-mail inválido.")
    check_new_password(password)

    users = get_stores()["users"]
    if users.find_one({"email": email}) is not None:
        raise ConflictError("Usuário já cadastrado.")

    user_id = users.insert_one({
        "nome": nome,
        "email": email,
        "password_hash": generate_password_hash(password),
        "created_at": datetime.utcnow(),
    })
    return {"id": user_id, "nome": nome, "email": email}
