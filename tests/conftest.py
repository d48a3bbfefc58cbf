import os
import smtplib
import sys

import pytest

# Os módulos da aplicação ficam na raiz do repositório
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from application import create_app  # noqa: E402
from extensions import db  # noqa: E402

BASE_CONFIG = {
    "TESTING": True,
    "APP_ENV": "production",
    "LOG_LEVEL": "WARNING",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "AUTO_CREATE_TABLES": True,
    "APP_TIMEZONE": "America/Sao_Paulo",
    "APP_BASE_URL": "http://erp.test",
    "MAIL_SERVER": "localhost",
    "MAIL_USERNAME": "erp@example.com",
    "MAIL_PASSWORD": "segredo",
    "MAIL_DEFAULT_SENDER": "erp@example.com",
    "BREVO_API_KEY": None,
    "REPORT_LOGO_PATH": None,
    "REPORT_COMPRESS": False,
}


def make_app(**overrides):
    config = dict(BASE_CONFIG)
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app():
    app = make_app()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def unconfigured_client():
    return make_app(SQLALCHEMY_DATABASE_URI=None).test_client()


@pytest.fixture
def unreachable_client(tmp_path):
    # Diretório inexistente: o SQLite não consegue abrir o arquivo
    missing = tmp_path / "nao-existe" / "erp.db"
    return make_app(SQLALCHEMY_DATABASE_URI=f"sqlite:///{missing}").test_client()


class FakeSMTP:
    """Servidor SMTP falso: guarda as mensagens em vez de enviá-las."""

    sent = []
    fail = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        pass

    def login(self, username, password):
        pass

    def send_message(self, message):
        if FakeSMTP.fail:
            raise smtplib.SMTPException("relay recusou a mensagem")
        FakeSMTP.sent.append(message)


@pytest.fixture
def outbox(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.fail = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP.sent


@pytest.fixture
def no_mail_client():
    return make_app(MAIL_USERNAME=None, MAIL_PASSWORD=None).test_client()
