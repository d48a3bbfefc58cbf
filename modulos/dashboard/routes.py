from flask import Blueprint, current_app, jsonify

from formatting import json_value, local_day_bounds
from modulos.financeiro.aggregator import aggregate_ledger, sum_amounts
from record_store import Range, get_stores

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/api/dashboard/stats", methods=["GET"])
def dashboard_stats():
    stores = get_stores()

    # "Hoje" é o dia no fuso local, convertido para os limites gravados em UTC
    start, end = local_day_bounds(current_app.config["APP_TIMEZONE"])
    vendas_hoje = stores["vendas"].find({"data": Range(start, end)})
    resumo = aggregate_ledger(stores["tesouraria"].find())

    return jsonify({
        "success": True,
        "stats": {
            "totalFuncionarios": stores["funcionarios"].count_documents(),
            "saldoAtual": json_value(resumo.balance),
            "totalVendasHoje": len(vendas_hoje),
            "valorVendasHoje": json_value(sum_amounts(vendas_hoje)),
            "itensEstoque": stores["estoque"].count_documents(),
        },
    })
