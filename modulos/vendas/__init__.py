"""Registro de vendas com número de nota gerado."""
