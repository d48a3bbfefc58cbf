"""
Extensões Flask - Configuração Centralizada
==========================================

Este arquivo contém as extensões Flask compartilhadas pela aplicação.
A ligação com o app acontece em ``application.create_app``.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS

# Instância do SQLAlchemy (ligada ao app via init_app)
db = SQLAlchemy()

# Instância do Flask-Migrate
migrate = Migrate()

cors = CORS()

from config_db import get_database_url, get_db_stats


def get_current_db_url():
    """Retorna URL atual do banco (None se não configurado)"""
    return get_database_url('auto')


__all__ = [
    'db',
    'migrate',
    'cors',
    'get_current_db_url',
    'get_db_stats',
]
