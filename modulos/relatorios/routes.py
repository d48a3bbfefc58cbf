from flask import Blueprint, current_app, send_file

from modulos.relatorios.layouts import REPORTS
from modulos.relatorios.renderer import ReportRenderer
from record_store import get_stores

relatorios_bp = Blueprint("relatorios", __name__)


def _render_report(slug: str):
    layout = REPORTS[slug]
    tz_name = current_app.config["APP_TIMEZONE"]

    # Leitura completa antes de desenhar: se a store falhar, nenhum byte de PDF sai
    records = get_stores()[layout.collection].find(sort=layout.sort)
    summary_fields, rows = layout.build(records, tz_name)

    renderer = ReportRenderer(
        logo_path=current_app.config.get("REPORT_LOGO_PATH"),
        compress=current_app.config.get("REPORT_COMPRESS", True),
    )
    buffer = renderer.render(
        title=layout.title,
        summary_fields=summary_fields,
        rows=rows,
        columns=layout.columns,
        table_title=layout.table_title,
        empty_message=layout.empty_message,
    )
    current_app.logger.info("Relatório %s gerado com %d linhas", slug, len(rows))
    return send_file(
        buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=layout.filename(tz_name),
    )


@relatorios_bp.route("/api/relatorio-financeiro", methods=["GET"])
def relatorio_financeiro():
    return _render_report("financeiro")


@relatorios_bp.route("/api/relatorio-contas-pagar", methods=["GET"])
def relatorio_contas_pagar():
    return _render_report("contas-pagar")


@relatorios_bp.route("/api/relatorio-contas-receber", methods=["GET"])
def relatorio_contas_receber():
    return _render_report("contas-receber")


@relatorios_bp.route("/api/relatorio-vendas", methods=["GET"])
def relatorio_vendas():
    return _render_report("vendas")


@relatorios_bp.route("/api/relatorio-estoque", methods=["GET"])
def relatorio_estoque():
    return _render_report("estoque")


@relatorios_bp.route("/api/relatorio-funcionarios", methods=["GET"])
def relatorio_funcionarios():
    return _render_report("funcionarios")
