"""
Definição de cada relatório: colunas, resumo e formatação das linhas.

Cada ``ReportLayout`` sabe de qual coleção ler, em que ordem, e como
transformar os documentos em campos de resumo e linhas já formatadas
(datas DD/MM/AAAA, moeda com 2 casas) para o ``ReportRenderer``.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from formatting import format_brl, format_currency, format_date, format_datetime, local_today, to_local
from modulos.financeiro.aggregator import CREDIT_KIND, aggregate_ledger, sum_amounts
from modulos.relatorios.renderer import Column, SummaryField

Builder = Callable[[List[dict], str], Tuple[List[SummaryField], List[Dict[str, str]]]]


@dataclass(frozen=True)
class ReportLayout:
    slug: str
    collection: str
    sort: Tuple[Tuple[str, int], ...]
    title: str
    table_title: str
    empty_message: str
    columns: Tuple[Column, ...]
    build: Builder

    def filename(self, tz_name: str) -> str:
        return f"relatorio-{self.slug}-{local_today(tz_name).isoformat()}.pdf"


def _build_ledger(records, tz_name):
    summary = aggregate_ledger(records)
    fields = [
        SummaryField('Total Entradas', format_brl(summary.total_credit), 'success'),
        SummaryField('Total Saídas', format_brl(summary.total_debit), 'danger'),
        SummaryField('Saldo Final', format_brl(summary.balance), 'success' if summary.balance >= 0 else 'danger'),
    ]
    rows = []
    for record in records:
        is_credit = record.get('tipo') == CREDIT_KIND
        rows.append({
            'data': format_datetime(record.get('data'), tz_name),
            'tipo': str(record.get('tipo') or '').upper(),
            'descricao': record.get('descricao') or '',
            'valor': format_currency(record.get('valor') or 0),
            '_cor': 'success' if is_credit else 'danger',
        })
    return fields, rows


def _accounts_builder(total_label: str, amount_color: str, settled_status: str) -> Builder:
    def build(records, tz_name):
        pending = sum(1 for record in records if record.get('status') == 'pendente')
        fields = [
            SummaryField(total_label, format_brl(sum_amounts(records)), amount_color),
            SummaryField('Contas Pendentes:', str(pending)),
            SummaryField('Total de Contas:', str(len(records))),
        ]
        rows = [
            {
                'descricao': record.get('descricao') or '',
                'valor': format_currency(record.get('valor') or 0),
                'vencimento': format_date(record.get('vencimento'), tz_name),
                'status': str(record.get('status') or '').upper(),
                '_cor_valor': amount_color,
                '_cor_status': 'success' if record.get('status') == settled_status else 'danger',
            }
            for record in records
        ]
        return fields, rows

    return build


def _build_sales(records, tz_name):
    today = local_today(tz_name)
    sold_today = sum(1 for record in records if record.get('data') and to_local(record['data'], tz_name).date() == today)
    fields = [
        SummaryField('Total em Vendas:', format_brl(sum_amounts(records)), 'success'),
        SummaryField('Vendas Hoje:', str(sold_today)),
        SummaryField('Total de Vendas:', str(len(records))),
    ]
    rows = [
        {
            'cliente': record.get('cliente') or '',
            'produto': record.get('produto') or '',
            'valor': format_currency(record.get('valor') or 0),
            'data': format_date(record.get('data'), tz_name),
            'numero_nota': record.get('numero_nota') or '',
            '_cor_valor': 'success',
        }
        for record in records
    ]
    return fields, rows


def _build_inventory(records, tz_name):
    # Agrupa os lotes por produto, na ordem em que aparecem
    grouped = OrderedDict()
    for record in records:
        product = grouped.setdefault(record.get('produto') or '', {'quantidade': 0, 'lotes': []})
        product['quantidade'] += int(record.get('quantidade') or 0)
        product['lotes'].append(record)

    total_items = sum(product['quantidade'] for product in grouped.values())
    fields = [
        SummaryField('Total de Itens:', str(total_items)),
        SummaryField('Produtos Diferentes:', str(len(grouped))),
        SummaryField('Valor Total (R$):', format_currency(sum_amounts(records, 'valor_total')), 'success'),
    ]
    rows = [
        {
            'produto': name,
            'quantidade': str(product['quantidade']),
            'valor_total': format_currency(sum_amounts(product['lotes'], 'valor_total')),
            '_cor_valor': 'success',
        }
        for name, product in grouped.items()
    ]
    return fields, rows


def _build_employees(records, tz_name):
    payroll = sum_amounts([record for record in records if record.get('salario') is not None], 'salario')
    fields = [
        SummaryField('Funcionários:', str(len(records))),
        SummaryField('Folha Salarial:', format_brl(payroll), 'danger'),
    ]
    rows = [
        {
            'nome': record.get('nome') or '',
            'cpf': record.get('cpf') or '',
            'cargo_admitido': record.get('cargo_admitido') or '',
            'data_admissao': format_date(record.get('data_admissao'), tz_name),
            'salario': format_currency(record['salario']) if record.get('salario') is not None else '',
        }
        for record in records
    ]
    return fields, rows


REPORTS: Dict[str, ReportLayout] = {
    'financeiro': ReportLayout(
        slug='financeiro',
        collection='tesouraria',
        sort=(('data', -1),),
        title='RELATÓRIO FINANCEIRO',
        table_title='LANÇAMENTOS',
        empty_message='Nenhum lançamento encontrado.',
        columns=(
            Column('data', 'Data', 45, 100),
            Column('tipo', 'Tipo', 155, 70, 'center', color_key='_cor'),
            Column('descricao', 'Descrição', 235, 200),
            Column('valor', 'Valor (R$)', 445, 100, 'right', color_key='_cor'),
        ),
        build=_build_ledger,
    ),
    'contas-pagar': ReportLayout(
        slug='contas-pagar',
        collection='contas_pagar',
        sort=(('vencimento', 1),),
        title='RELATÓRIO - CONTAS A PAGAR',
        table_title='CONTAS A PAGAR',
        empty_message='Nenhuma conta a pagar encontrada.',
        columns=(
            Column('descricao', 'Descrição', 45, 200),
            Column('valor', 'Valor (R$)', 255, 100, 'right', color_key='_cor_valor'),
            Column('vencimento', 'Vencimento', 365, 100, 'center'),
            Column('status', 'Status', 475, 70, 'center', color_key='_cor_status'),
        ),
        build=_accounts_builder('Total a Pagar:', 'danger', settled_status='pago'),
    ),
    'contas-receber': ReportLayout(
        slug='contas-receber',
        collection='contas_receber',
        sort=(('vencimento', 1),),
        title='RELATÓRIO - CONTAS A RECEBER',
        table_title='CONTAS A RECEBER',
        empty_message='Nenhuma conta a receber encontrada.',
        columns=(
            Column('descricao', 'Descrição', 45, 200),
            Column('valor', 'Valor (R$)', 255, 100, 'right', color_key='_cor_valor'),
            Column('vencimento', 'Vencimento', 365, 100, 'center'),
            Column('status', 'Status', 475, 70, 'center', color_key='_cor_status'),
        ),
        build=_accounts_builder('Total a Receber:', 'success', settled_status='recebido'),
    ),
    'vendas': ReportLayout(
        slug='vendas',
        collection='vendas',
        sort=(('data', -1),),
        title='RELATÓRIO DE VENDAS',
        table_title='VENDAS REALIZADAS',
        empty_message='Nenhuma venda encontrada.',
        columns=(
            Column('cliente', 'Cliente', 45, 120),
            Column('produto', 'Produto', 175, 120),
            Column('valor', 'Valor (R$)', 305, 80, 'right', color_key='_cor_valor'),
            Column('data', 'Data', 395, 80, 'center'),
            Column('numero_nota', 'Nota Fiscal', 485, 70, 'center'),
        ),
        build=_build_sales,
    ),
    'estoque': ReportLayout(
        slug='estoque',
        collection='estoque',
        sort=(('data_entrada', -1),),
        title='RELATÓRIO DE ESTOQUE',
        table_title='ESTOQUE ATUAL',
        empty_message='Nenhum item em estoque.',
        columns=(
            Column('produto', 'Produto', 45, 250),
            Column('quantidade', 'Quantidade', 305, 100, 'right'),
            Column('valor_total', 'Valor Total (R$)', 415, 140, 'right', color_key='_cor_valor'),
        ),
        build=_build_inventory,
    ),
    'funcionarios': ReportLayout(
        slug='funcionarios',
        collection='funcionarios',
        sort=(('nome', 1),),
        title='RELATÓRIO DE FUNCIONÁRIOS',
        table_title='QUADRO DE FUNCIONÁRIOS',
        empty_message='Nenhum funcionário cadastrado.',
        columns=(
            Column('nome', 'Nome', 45, 150),
            Column('cpf', 'CPF', 205, 90),
            Column('cargo_admitido', 'Cargo', 305, 110),
            Column('data_admissao', 'Admissão', 425, 60, 'center'),
            Column('salario', 'Salário (R$)', 495, 60, 'right'),
        ),
        build=_build_employees,
    ),
}
