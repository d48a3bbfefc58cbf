import time
from datetime import datetime

from flask import Blueprint, current_app, jsonify

from errors import NotFoundError
from formatting import json_document
from record_store import get_stores
from validation import get_json_body, parse_money, require_text

vendas_bp = Blueprint("vendas", __name__)


def gerar_numero_nota() -> str:
    """Número da nota: 'NF' + timestamp de criação em milissegundos."""
    return f"NF{int(time.time() * 1000)}"


@vendas_bp.route("/api/vendas", methods=["POST"])
def registrar_venda():
    data = get_json_body()
    cliente = require_text(data, "cliente")
    produto = require_text(data, "produto")
    valor = parse_money(data.get("valor"), "valor")

    now = datetime.utcnow()
    store = get_stores()["vendas"]
    venda_id = store.insert_one({
        "cliente": cliente,
        "produto": produto,
        "valor": valor,
        "numero_nota": gerar_numero_nota(),
        "data": now,
        "created_at": now,
    })
    current_app.logger.info("Venda registrada: %s para %s", produto, cliente)
    return jsonify({"success": True, "venda": json_document(store.find_by_id(venda_id))})


@vendas_bp.route("/api/vendas", methods=["GET"])
def listar_vendas():
    vendas = get_stores()["vendas"].find(sort=[("data", -1)])
    return jsonify({"success": True, "vendas": [json_document(venda) for venda in vendas]})


@vendas_bp.route("/api/vendas/<int:venda_id>", methods=["GET"])
def buscar_venda(venda_id: int):
    venda = get_stores()["vendas"].find_by_id(venda_id)
    if venda is None:
        raise NotFoundError("Venda não encontrada")
    return jsonify({"success": True, "venda": json_document(venda)})
