from datetime import datetime

from flask import Blueprint, current_app, jsonify

from errors import NotFoundError
from formatting import json_document, quantize_money
from record_store import get_stores
from validation import check_amount, get_json_body, optional_text, parse_money, parse_non_negative_int, require_text

estoque_bp = Blueprint("estoque", __name__)


@estoque_bp.route("/api/estoque", methods=["POST"])
def registrar_entrada():
    data = get_json_body()
    produto = require_text(data, "produto")
    quantidade = parse_non_negative_int(data.get("quantidade"), "quantidade")
    valor_unitario = parse_money(data.get("valor_unitario"), "valor_unitario", allow_zero=True)

    now = datetime.utcnow()
    store = get_stores()["estoque"]
    entrada_id = store.insert_one({
        "produto": produto,
        "quantidade": quantidade,
        "valor_unitario": valor_unitario,
        "valor_total": quantize_money(check_amount(quantidade * valor_unitario, "valor_total")),
        "nota_fiscal": optional_text(data, "nota_fiscal"),
        "data_entrada": now,
        "created_at": now,
    })
    current_app.logger.info("Entrada no estoque: %s x%d", produto, quantidade)
    return jsonify({"success": True, "entrada": json_document(store.find_by_id(entrada_id))})


@estoque_bp.route("/api/estoque", methods=["GET"])
def listar_estoque():
    estoque = get_stores()["estoque"].find(sort=[("data_entrada", -1)])
    return jsonify({"success": True, "estoque": [json_document(item) for item in estoque]})


@estoque_bp.route("/api/estoque/<int:entrada_id>", methods=["GET"])
def buscar_entrada(entrada_id: int):
    entrada = get_stores()["estoque"].find_by_id(entrada_id)
    if entrada is None:
        raise NotFoundError("Entrada de estoque não encontrada")
    return jsonify({"success": True, "entrada": json_document(entrada)})
