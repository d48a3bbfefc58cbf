"""
Módulo de Relatórios PDF
========================

- renderer.py: desenho do documento (cabeçalho, resumo, tabela paginada)
- layouts.py: colunas e resumo de cada relatório
- routes.py: endpoints /api/relatorio-*
"""
