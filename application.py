# application.py
"""
Arquivo de entrada WSGI (Gunicorn / Elastic Beanstalk)
O servidor procura especificamente por uma variável chamada 'application'
"""

import logging
import os

import click
from dotenv import load_dotenv
from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from email_service import init_mail
from errors import register_error_handlers
from extensions import cors, db, get_current_db_url, get_db_stats, migrate
from global_blueprints import register_blueprints
from models import COLLECTIONS
from record_store import EXTENSION_KEY, StoreRegistry

# Carregar variáveis de ambiente
load_dotenv()

logger = logging.getLogger(__name__)

# Mensagem devolvida quando um campo único já existe na coleção
DUPLICATE_MESSAGES = {
    "users": "Usuário já cadastrado.",
    "funcionarios": "Funcionário já cadastrado.",
}


def _configure_logging(app: Flask) -> None:
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)


def _init_database(app: Flask) -> bool:
    """Liga SQLAlchemy/Migrate ao app. Retorna False se não houver URL de banco."""
    if "SQLALCHEMY_DATABASE_URI" not in app.config:
        app.config["SQLALCHEMY_DATABASE_URI"] = get_current_db_url()
    database_url = app.config["SQLALCHEMY_DATABASE_URI"]

    if not database_url:
        logger.warning("Nenhum banco configurado (DATABASE_URL); rotas de dados responderão 503")
        return False

    if not database_url.startswith("sqlite"):
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {
            "pool_pre_ping": True,
            "pool_recycle": 300,
        })

    db.init_app(app)
    migrate.init_app(app, db)
    return True


def create_app(config_overrides: dict | None = None, stores: StoreRegistry | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)

    database_ready = _init_database(app)
    init_mail(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # Stores por coleção; podem ser injetadas (ex.: testes)
    if stores is None:
        stores = StoreRegistry(db if database_ready else None, COLLECTIONS, DUPLICATE_MESSAGES)
    app.extensions[EXTENSION_KEY] = stores

    register_error_handlers(app)
    register_blueprints(app)

    if database_ready and app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            try:
                db.create_all()
            except SQLAlchemyError as e:
                logger.error("Não foi possível criar as tabelas na subida: %s", e)

    @app.cli.command('init-db')
    def init_db_command():
        """Cria as tabelas no banco configurado."""
        if not database_ready:
            raise click.ClickException('Nenhum banco configurado (defina DATABASE_URL).')
        with app.app_context():
            db.create_all()
        click.echo('✅ Banco inicializado com sucesso!')

    @app.cli.command('db-stats')
    def db_stats_command():
        """Mostra estatísticas do banco de dados."""
        stats = get_db_stats(app.config.get("SQLALCHEMY_DATABASE_URI"))
        click.echo(f"📊 Estatísticas do Banco: {stats['type']}")
        click.echo(f"🔗 Status: {stats['status']}")
        if stats.get('url'):
            click.echo(f"🌐 URL: {stats['url']}")
        if stats.get('tables'):
            click.echo(f"📋 Tabelas: {', '.join(stats['tables'])}")
        if stats.get('connections'):
            click.echo(f"🔗 Conexões: {stats['connections']}")

    logger.info("Aplicação iniciada (ambiente=%s, banco=%s)", app.config.get("APP_ENV"),
                "configurado" if database_ready else "ausente")
    return app


# Instância global usada por WSGI/Gunicorn/Elastic Beanstalk
application: Flask = create_app()

# Alias para compatibilidade com código que usa "app"
app = application


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    application.run(debug=application.config.get("APP_ENV") == "development", host='0.0.0.0', port=port)
