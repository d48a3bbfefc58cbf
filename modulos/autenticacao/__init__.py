"""Autenticação: cadastro, login e recuperação de senha."""
