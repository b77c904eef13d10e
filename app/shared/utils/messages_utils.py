# app/shared/utils/messages_utils.py

"""
Sistema de mensagens multilíngue para validação e feedback da API.

Este módulo fornece suporte a tradução de mensagens em diferentes idiomas,
facilitando a internacionalização do sistema (i18n).
"""

from typing import Dict

# Dicionário principal de mensagens
MESSAGES: Dict[str, Dict[str, str]] = {
    # Password validation
    "password_empty": {
        "pt": "Senha não pode estar vazia.",
        "en": "Password cannot be empty."
    },
    "password_too_short": {
        "pt": "Senha deve ter pelo menos {min} caracteres.",
        "en": "Password must be at least {min} characters long."
    },
    "password_too_long": {
        "pt": "Senha é muito longa (máximo {max} bytes).",
        "en": "Password is too long (maximum {max} bytes)."
    },
    "password_missing_uppercase": {
        "pt": "Senha deve conter pelo menos uma letra maiúscula.",
        "en": "Password must contain at least one uppercase letter."
    },
    "password_missing_lowercase": {
        "pt": "Senha deve conter pelo menos uma letra minúscula.",
        "en": "Password must contain at least one lowercase letter."
    },
    "password_missing_number": {
        "pt": "Senha deve conter pelo menos um número.",
        "en": "Password must contain at least one number."
    },
    "password_missing_special": {
        "pt": "Senha deve conter pelo menos um caractere especial (!@#$%^&*).",
        "en": "Password must contain at least one special character (!@#$%^&*)."
    },

    # Username validation
    "username_empty": {
        "pt": "Username não pode estar vazio.",
        "en": "Username cannot be empty."
    },
    "username_invalid": {
        "pt": "Username contém caracteres não permitidos.",
        "en": "Username contains forbidden characters."
    },

    # Email validation
    "email_invalid": {
        "pt": "Formato de e-mail inválido.",
        "en": "Invalid email format."
    },
    "email_too_long": {
        "pt": "E-mail é muito longo (máximo {max} caracteres).",
        "en": "Email is too long (maximum {max} characters)."
    },
    "email_empty": {
        "pt": "E-mail não pode estar vazio.",
        "en": "Email cannot be empty."
    },

    # Phone validation
    "phone_empty": {
        "pt": "Telefone não pode estar vazio.",
        "en": "Phone cannot be empty."
    },
    "phone_invalid": {
        "pt": "Telefone contém caracteres não permitidos.",
        "en": "Phone contains forbidden characters."
    },
    "phone_digits": {
        "pt": "Telefone deve ter entre {min} e {max} dígitos.",
        "en": "Phone must have between {min} and {max} digits."
    },

    # Generic fields
    "field_too_long": {
        "pt": "Campo '{field}' excede o tamanho máximo de {max} caracteres.",
        "en": "Field '{field}' exceeds maximum length of {max} characters."
    },

    # Auth
    "generic_invalid_credentials": {
        "pt": "Credenciais inválidas.",
        "en": "Invalid credentials."
    },
    "logout_success": {
        "pt": "Logout realizado com sucesso.",
        "en": "Logged out successfully."
    },
    "logout_all_success": {
        "pt": "Todas as sessões foram encerradas.",
        "en": "All sessions have been terminated."
    },
}


def get_message(key: str, language: str = "en", **kwargs) -> str:
    """
    Recupera uma mensagem formatada baseada na chave e no idioma.

    Args:
        key (str): Chave da mensagem.
        language (str): Idioma desejado ('pt', 'en', etc).
        kwargs: Variáveis a serem interpoladas na mensagem.

    Returns:
        str: Mensagem finalizada.
    """
    try:
        template = MESSAGES[key][language]
    except KeyError:
        # Tenta usar inglês como fallback
        template = MESSAGES.get(key, {}).get("en", f"[Message not found: {key}]")

    return template.format(**kwargs)
