import os

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'chave_padrao_insegura')

    # production | development (development expõe detalhes dos erros 500)
    APP_ENV = os.getenv('APP_ENV', 'production').strip().lower()

    # Fuso usado para "vendas de hoje" e para as datas dos relatórios
    APP_TIMEZONE = os.getenv('APP_TIMEZONE', 'America/Sao_Paulo')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Origens liberadas para /api/* (separadas por vírgula)
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

    REPORT_LOGO_PATH = os.getenv(
        'REPORT_LOGO_PATH',
        os.path.join(BASE_DIR, 'static', 'assets', 'logo.png'),
    )

    # Cria as tabelas na subida da aplicação (equivalente ao init-db)
    AUTO_CREATE_TABLES = os.getenv('AUTO_CREATE_TABLES', '1').strip().lower() in {'1', 'true', 'yes', 'sim'}

    SQLALCHEMY_TRACK_MODIFICATIONS = False
