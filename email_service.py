#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Serviço de envio de emails (SMTP direto ou API HTTP da Brevo)"""

from flask import Flask, render_template_string
import os
from dotenv import load_dotenv
import logging
import smtplib
import ssl
import requests
from email.message import EmailMessage
from email.utils import parseaddr

load_dotenv()

logger = logging.getLogger(__name__)

BREVO_SEND_URL = "https://api.brevo.com/v3/smtp/email"


def _env_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    return v in ("1", "true", "t", "yes", "y", "on")


def init_mail(app: Flask):
    """Carrega a configuração de email no app.

    Valores já presentes em ``app.config`` (ex.: overrides de teste) têm
    prioridade sobre o ambiente.
    """
    app.config.setdefault('MAIL_SERVER', os.getenv('MAIL_SERVER', 'smtp-relay.brevo.com'))
    app.config.setdefault('MAIL_PORT', int(os.getenv('MAIL_PORT', 587)))
    app.config.setdefault('MAIL_USE_TLS', _env_bool(os.getenv('MAIL_USE_TLS', 'true'), default=True))
    app.config.setdefault('MAIL_USE_SSL', _env_bool(os.getenv('MAIL_USE_SSL', 'false'), default=False))

    raw_sender = os.getenv('MAIL_DEFAULT_SENDER')
    if raw_sender:
        _, parsed_email = parseaddr(raw_sender)
        app.config.setdefault('MAIL_DEFAULT_SENDER', parsed_email or raw_sender)
    else:
        app.config.setdefault('MAIL_DEFAULT_SENDER', os.getenv('MAIL_USERNAME'))
    app.config.setdefault('MAIL_USERNAME', os.getenv('MAIL_USERNAME') or os.getenv('MAIL_DEFAULT_SENDER'))
    app.config.setdefault('MAIL_PASSWORD', os.getenv('MAIL_PASSWORD'))
    app.config.setdefault('MAIL_TIMEOUT', int(os.getenv('MAIL_TIMEOUT', 30)))

    # Base da URL usada nos links enviados por email
    app.config.setdefault('APP_BASE_URL', os.getenv('APP_BASE_URL', '').rstrip('/'))

    app.config.setdefault('BREVO_API_KEY', os.getenv('BREVO_API_KEY'))
    app.config.setdefault('BREVO_SENDER_NAME', os.getenv('BREVO_SENDER_NAME'))
    app.config.setdefault('BREVO_SENDER_EMAIL', os.getenv('BREVO_SENDER_EMAIL'))


def _brevo_enabled(app: Flask) -> bool:
    return bool(app.config.get('BREVO_API_KEY'))


def mail_configured(app: Flask) -> bool:
    """Há credenciais para algum dos relays (Brevo HTTP ou SMTP)?"""
    if _brevo_enabled(app):
        return bool(app.config.get('BREVO_SENDER_EMAIL') or app.config.get('MAIL_DEFAULT_SENDER'))
    return bool(app.config.get('MAIL_USERNAME') and app.config.get('MAIL_PASSWORD'))


def _send_brevo_email(app: Flask, subject: str, recipients: list[str], html: str) -> bool:
    sender_email = app.config.get('BREVO_SENDER_EMAIL') or app.config.get('MAIL_DEFAULT_SENDER')
    sender_name = app.config.get('BREVO_SENDER_NAME')

    payload = {
        "sender": {"email": sender_email},
        "to": [{"email": r} for r in recipients],
        "subject": subject,
        "htmlContent": html,
    }
    if sender_name:
        payload["sender"]["name"] = sender_name

    headers = {
        "accept": "application/json",
        "api-key": app.config['BREVO_API_KEY'],
        "content-type": "application/json",
    }

    try:
        resp = requests.post(
            BREVO_SEND_URL,
            headers=headers,
            json=payload,
            timeout=int(app.config.get('MAIL_TIMEOUT', 30)),
        )
    except requests.RequestException as e:
        logger.error("[BREVO] Erro ao enviar email: %s", e)
        return False

    if 200 <= resp.status_code < 300:
        logger.info("[BREVO] Email enviado para %s", recipients)
        return True

    logger.error("[BREVO] Falha ao enviar email (status=%s): %s", resp.status_code, resp.text)
    return False


def _send_smtp_email(app: Flask, subject: str, recipients: list[str], html: str) -> bool:
    message = EmailMessage()
    message['Subject'] = subject
    message['From'] = app.config.get('MAIL_DEFAULT_SENDER') or app.config.get('MAIL_USERNAME')
    message['To'] = ', '.join(recipients)
    message.set_content("Abra este email em um leitor compatível com HTML.")
    message.add_alternative(html, subtype='html')

    host = app.config['MAIL_SERVER']
    port = int(app.config['MAIL_PORT'])
    timeout = int(app.config.get('MAIL_TIMEOUT', 30))

    try:
        if app.config.get('MAIL_USE_SSL'):
            server = smtplib.SMTP_SSL(host, port, context=ssl.create_default_context(), timeout=timeout)
        else:
            server = smtplib.SMTP(host, port, timeout=timeout)
        with server:
            if app.config.get('MAIL_USE_TLS') and not app.config.get('MAIL_USE_SSL'):
                server.starttls(context=ssl.create_default_context())
            if app.config.get('MAIL_USERNAME'):
                server.login(app.config['MAIL_USERNAME'], app.config.get('MAIL_PASSWORD') or '')
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("[SMTP] Erro ao enviar email para %s: %s", recipients, e)
        return False

    logger.info("[SMTP] Email enviado para %s", recipients)
    return True


PASSWORD_RESET_TEMPLATE = """
<html>
    <head>
        <style>
            body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
            .container { max-width: 600px; margin: 0 auto; padding: 20px; }
            .header { background: #2c3e50; color: white; padding: 20px; border-radius: 8px; }
            .content { background: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0; }
            .button { display: inline-block; background: #27ae60; color: white; padding: 12px 24px; border-radius: 6px; text-decoration: none; margin: 10px 0; }
            .footer { text-align: center; color: #999; font-size: 12px; margin-top: 20px; }
        </style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>Recuperação de Senha</h1>
            </div>
            <div class="content">
                <p>Olá{% if nome %}, {{ nome }}{% endif %}! Clique no botão abaixo para redefinir sua senha:</p>
                <a href="{{ reset_link }}" class="button">Redefinir Senha</a>
                <p><small>Este link expira em 1 hora.</small></p>
            </div>
            <div class="footer">
                <p>Sistema de Gestão Empresarial</p>
            </div>
        </div>
    </body>
</html>
"""


def send_password_reset(recipient_email: str, reset_link: str, app: Flask, nome: str | None = None) -> bool:
    """Envia link de recuperação de senha. Retorna False se o relay falhar."""
    with app.app_context():
        html_body = render_template_string(PASSWORD_RESET_TEMPLATE, reset_link=reset_link, nome=nome)
        subject = 'Recuperação de Senha'

        if _brevo_enabled(app):
            return _send_brevo_email(app, subject=subject, recipients=[recipient_email], html=html_body)
        return _send_smtp_email(app, subject=subject, recipients=[recipient_email], html=html_body)
