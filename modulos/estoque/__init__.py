"""Entradas de estoque (lotes com valor total calculado)."""
