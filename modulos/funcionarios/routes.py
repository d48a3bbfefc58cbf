from datetime import datetime

from flask import Blueprint, current_app, jsonify

from errors import NotFoundError, ValidationError
from formatting import json_document, local_today
from record_store import get_stores
from validation import get_json_body, optional_text, parse_date, parse_money, require_text

funcionarios_bp = Blueprint("funcionarios", __name__)

TEXT_FIELDS = (
    "nome", "cpf", "rg", "filiacao",
    "cep", "logradouro", "numero", "bairro", "cidade", "estado",
    "telefone", "email", "cargo_admitido",
)
REQUIRED_FIELDS = ("nome", "cpf")


def _parse_funcionario(data: dict, partial: bool = False) -> dict:
    """Monta o documento a partir do payload; com partial, só os campos enviados."""
    doc = {}
    for field in TEXT_FIELDS:
        if partial and field not in data:
            continue
        if field in REQUIRED_FIELDS:
            doc[field] = require_text(data, field)
        else:
            doc[field] = optional_text(data, field)

    if "email" in doc and doc["email"]:
        doc["email"] = doc["email"].lower()

    if not partial or "salario" in data:
        salario = data.get("salario")
        doc["salario"] = parse_money(salario, "salario", allow_zero=True) if salario not in (None, "") else None

    if data.get("data_admissao"):
        doc["data_admissao"] = parse_date(data["data_admissao"], "data_admissao")
    elif not partial:
        doc["data_admissao"] = local_today(current_app.config["APP_TIMEZONE"])
    elif "data_admissao" in data:
        raise ValidationError("Campo obrigatório: data_admissao")

    return doc


@funcionarios_bp.route("/api/funcionarios", methods=["POST"])
def cadastrar_funcionario():
    doc = _parse_funcionario(get_json_body())
    now = datetime.utcnow()
    doc.update(created_at=now, updated_at=now)

    store = get_stores()["funcionarios"]
    funcionario_id = store.insert_one(doc)
    current_app.logger.info("Funcionário cadastrado: %s", doc["nome"])
    return jsonify({
        "success": True,
        "message": "Funcionário cadastrado com sucesso!",
        "funcionario": json_document(store.find_by_id(funcionario_id)),
    })


@funcionarios_bp.route("/api/funcionarios", methods=["GET"])
def listar_funcionarios():
    funcionarios = get_stores()["funcionarios"].find(sort=[("nome", 1)])
    return jsonify({"success": True, "funcionarios": [json_document(f) for f in funcionarios]})


@funcionarios_bp.route("/api/funcionarios/<int:funcionario_id>", methods=["GET"])
def buscar_funcionario(funcionario_id: int):
    funcionario = get_stores()["funcionarios"].find_by_id(funcionario_id)
    if funcionario is None:
        raise NotFoundError("Funcionário não encontrado")
    return jsonify({"success": True, "funcionario": json_document(funcionario)})


@funcionarios_bp.route("/api/funcionarios/<int:funcionario_id>", methods=["PUT"])
def atualizar_funcionario(funcionario_id: int):
    patch = _parse_funcionario(get_json_body(), partial=True)
    patch["updated_at"] = datetime.utcnow()

    if get_stores()["funcionarios"].update_one(funcionario_id, patch) == 0:
        raise NotFoundError("Funcionário não encontrado")
    current_app.logger.info("Funcionário atualizado: id=%s", funcionario_id)
    return jsonify({"success": True, "message": "Funcionário atualizado com sucesso!"})


@funcionarios_bp.route("/api/funcionarios/<int:funcionario_id>", methods=["DELETE"])
def deletar_funcionario(funcionario_id: int):
    if get_stores()["funcionarios"].delete_one(funcionario_id) == 0:
        raise NotFoundError("Funcionário não encontrado")
    current_app.logger.info("Funcionário deletado: id=%s", funcionario_id)
    return jsonify({"success": True, "message": "Funcionário deletado com sucesso!"})
