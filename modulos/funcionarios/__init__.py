"""Cadastro de funcionários."""
