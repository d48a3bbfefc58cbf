"""Estatísticas do painel inicial."""
