"""
Módulo Financeiro
=================

- aggregator.py: soma dos lançamentos da tesouraria (entradas, saídas, saldo)
- routes.py: endpoints JSON da tesouraria e das contas a pagar/receber
"""
