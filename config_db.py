"""
Configuração Centralizada do Banco de Dados
===========================================

Resolve a URL de conexão das stores a partir do ambiente.

Ordem de resolução:
- DATABASE_URL (PostgreSQL em produção ou qualquer URL SQLAlchemy)
- DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD (PostgreSQL montado por partes)
- SQLITE_PATH (desenvolvimento/local)

Sem nenhuma delas a aplicação sobe mesmo assim, mas as rotas que dependem
do banco respondem 503.

Uso:
    from config_db import get_database_url, get_db_stats

    url = get_database_url()
    stats = get_db_stats(url)
"""

import os
from typing import Dict, Any, Optional
from urllib.parse import urlparse

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv

# Carregar variáveis de ambiente
load_dotenv()

# Configurações padrão
DEFAULT_CONFIG = {
    # PostgreSQL (Produção)
    'postgresql': {
        'host': None,
        'port': 5432,
        'database': 'gestao_empresarial',
        'username': 'postgres',
        'password': '',
    },

    # SQLite (Desenvolvimento)
    'sqlite': {
        'path': None,
    },
}


def detect_db_type(database_url: Optional[str]) -> str:
    """Identifica o tipo de banco pela URL ('postgresql', 'sqlite' ou 'none')."""
    if not database_url:
        return 'none'
    scheme = urlparse(database_url).scheme
    if scheme.startswith('postgres'):
        return 'postgresql'
    if scheme.startswith('sqlite'):
        return 'sqlite'
    return scheme.split('+')[0] or 'none'


def get_db_config(db_type: str = 'auto') -> Dict[str, Any]:
    """
    Retorna configuração completa do banco de dados.

    Args:
        db_type: Tipo de banco ('postgresql', 'sqlite', 'auto')

    Returns:
        Dicionário com configurações do banco
    """

    if db_type == 'auto':
        if os.getenv('DATABASE_URL'):
            actual_db_type = detect_db_type(os.getenv('DATABASE_URL'))
        elif os.getenv('DB_HOST'):
            actual_db_type = 'postgresql'
        elif os.getenv('SQLITE_PATH'):
            actual_db_type = 'sqlite'
        else:
            actual_db_type = 'none'
    else:
        actual_db_type = db_type

    config = DEFAULT_CONFIG.get(actual_db_type, {}).copy()
    config['type'] = actual_db_type

    # Sobrescrever com variáveis de ambiente
    if actual_db_type == 'postgresql':
        config.update({
            'host': os.getenv('DB_HOST', config.get('host')),
            'port': int(os.getenv('DB_PORT', config.get('port'))),
            'database': os.getenv('DB_NAME', config.get('database')),
            'username': os.getenv('DB_USER', config.get('username')),
            'password': os.getenv('DB_PASSWORD', config.get('password')),
        })

    elif actual_db_type == 'sqlite':
        config.update({
            'path': os.getenv('SQLITE_PATH', config.get('path')),
        })

    return config


def get_database_url(db_type: str = 'auto') -> Optional[str]:
    """
    Retorna a URL de conexão SQLAlchemy, ou None se nada estiver configurado.
    """

    if db_type == 'auto':
        database_url = os.getenv('DATABASE_URL')
        if database_url:
            # Provedores antigos ainda entregam o esquema "postgres://"
            if database_url.startswith('postgres://'):
                database_url = 'postgresql://' + database_url[len('postgres://'):]
            return database_url

    config = get_db_config(db_type)

    if config['type'] == 'postgresql' and config.get('host'):
        return (
            f"postgresql://{config['username']}:{config['password']}"
            f"@{config['host']}:{config['port']}/{config['database']}"
        )

    if config['type'] == 'sqlite' and config.get('path'):
        return f"sqlite:///{config['path']}"

    return None


def mask_database_url(database_url: Optional[str]) -> Optional[str]:
    """Oculta a senha da URL para exibição em logs e na CLI."""
    if not database_url:
        return None
    parsed = urlparse(database_url)
    if not parsed.password:
        return database_url
    return database_url.replace(f":{parsed.password}@", ":***@", 1)


def get_db_stats(database_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Retorna estatísticas do banco de dados.

    Returns:
        Dicionário com tipo, URL mascarada, tabelas e status
    """

    if database_url is None:
        database_url = get_database_url()

    stats = {
        'type': detect_db_type(database_url),
        'url': mask_database_url(database_url),
        'tables': [],
        'connections': 0,
    }

    if not database_url:
        stats['status'] = 'not configured'
        return stats

    engine = create_engine(database_url)
    try:
        stats['tables'] = sorted(inspect(engine).get_table_names())
        if stats['type'] == 'postgresql':
            with engine.connect() as conn:
                stats['connections'] = conn.execute(text("SELECT count(*) FROM pg_stat_activity")).scalar()
        stats['status'] = 'connected'
    except SQLAlchemyError as e:
        stats['status'] = f'error: {e}'
    finally:
        engine.dispose()

    return stats
