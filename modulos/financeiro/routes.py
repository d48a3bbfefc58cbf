"""
Rotas financeiras: tesouraria (fluxo de caixa) e contas a pagar/receber.
"""

from datetime import datetime

from flask import Blueprint, current_app, jsonify

from errors import NotFoundError, ValidationError
from formatting import json_document
from modulos.financeiro.aggregator import LEDGER_KINDS, aggregate_ledger
from record_store import get_stores
from validation import get_json_body, optional_text, parse_date, parse_money

financeiro_bp = Blueprint("financeiro", __name__)

PENDING_STATUS = "pendente"


# ==================== TESOURARIA ====================

@financeiro_bp.route("/api/tesouraria", methods=["POST"])
def criar_lancamento():
    data = get_json_body()
    tipo = optional_text(data, "tipo")
    descricao = optional_text(data, "descricao")
    try:
        valor = parse_money(data.get("valor"), "valor")
    except ValidationError:
        valor = None
    # Mesma resposta genérica para qualquer campo inválido
    if tipo not in LEDGER_KINDS or not descricao or valor is None:
        raise ValidationError()

    store = get_stores()["tesouraria"]
    lancamento_id = store.insert_one({
        "tipo": tipo,
        "valor": valor,
        "descricao": descricao,
        "data": datetime.utcnow(),
    })
    current_app.logger.info("Lançamento financeiro registrado: %s %s (%s)", tipo, valor, descricao)
    return jsonify({"success": True, "data": json_document(store.find_by_id(lancamento_id))})


@financeiro_bp.route("/api/tesouraria", methods=["GET"])
def listar_lancamentos():
    lancamentos = get_stores()["tesouraria"].find(sort=[("data", -1)])
    return jsonify({
        "success": True,
        "lancamentos": [json_document(item) for item in lancamentos],
        "resumo": aggregate_ledger(lancamentos).to_dict(),
    })


@financeiro_bp.route("/api/tesouraria/resumo", methods=["GET"])
def resumo_tesouraria():
    lancamentos = get_stores()["tesouraria"].find()
    return jsonify({"success": True, "resumo": aggregate_ledger(lancamentos).to_dict()})


# ==================== CONTAS A PAGAR / RECEBER ====================

def _criar_conta(collection: str, label: str):
    data = get_json_body()
    descricao = optional_text(data, "descricao")
    if not descricao:
        raise ValidationError("Campo obrigatório: descricao")
    valor = parse_money(data.get("valor"), "valor")
    vencimento = parse_date(data.get("vencimento"), "vencimento")

    store = get_stores()[collection]
    conta_id = store.insert_one({
        "descricao": descricao,
        "valor": valor,
        "vencimento": vencimento,
        "status": PENDING_STATUS,
        "created_at": datetime.utcnow(),
    })
    current_app.logger.info("Conta a %s cadastrada: %s", label, descricao)
    return jsonify({"success": True, "conta": json_document(store.find_by_id(conta_id))})


def _listar_contas(collection: str):
    contas = get_stores()[collection].find(sort=[("vencimento", 1)])
    return jsonify({"success": True, "contas": [json_document(conta) for conta in contas]})


def _buscar_conta(collection: str, conta_id: int):
    conta = get_stores()[collection].find_by_id(conta_id)
    if conta is None:
        raise NotFoundError("Conta não encontrada")
    return jsonify({"success": True, "conta": json_document(conta)})


@financeiro_bp.route("/api/contas-pagar", methods=["POST"])
def criar_conta_pagar():
    return _criar_conta("contas_pagar", "pagar")


@financeiro_bp.route("/api/contas-pagar", methods=["GET"])
def listar_contas_pagar():
    return _listar_contas("contas_pagar")


@financeiro_bp.route("/api/contas-pagar/<int:conta_id>", methods=["GET"])
def buscar_conta_pagar(conta_id: int):
    return _buscar_conta("contas_pagar", conta_id)


@financeiro_bp.route("/api/contas-receber", methods=["POST"])
def criar_conta_receber():
    return _criar_conta("contas_receber", "receber")


@financeiro_bp.route("/api/contas-receber", methods=["GET"])
def listar_contas_receber():
    return _listar_contas("contas_receber")


@financeiro_bp.route("/api/contas-receber/<int:conta_id>", methods=["GET"])
def buscar_conta_receber(conta_id: int):
    return _buscar_conta("contas_receber", conta_id)
