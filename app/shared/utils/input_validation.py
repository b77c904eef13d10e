# app/shared/utils/input_validation.py

import regex
import re
from typing import Optional, Tuple, List
from app.shared.utils.messages_utils import get_message


class InputValidator:
    """
    Classe para validação de entradas de usuário.

    Utiliza expressões regulares para validar usernames, e-mails e telefones,
    além de verificar a força de senhas.
    """

    # ─────────────────────────────────────────────────────────────
    # Constantes de limites
    MAX_USERNAME_LENGTH = 150
    MAX_PASSWORD_LENGTH = 72  # Limite seguro para hashing de senha (ex: bcrypt)
    MIN_PASSWORD_LENGTH = 8
    MAX_EMAIL_LENGTH = 255
    MIN_PHONE_DIGITS = 7
    MAX_PHONE_DIGITS = 15  # E.164

    # ─────────────────────────────────────────────────────────────
    # Expressões Regulares para validações

    # Username (USERNAME_PATTERN):
    # - \p{L}: qualquer letra (de qualquer idioma)
    # - 0-9, ponto, underline, hífen e @ (usernames podem ser e-mails)
    USERNAME_PATTERN = regex.compile(
        r"^[\p{L}0-9._@+-]+$",
        flags=regex.UNICODE
    )

    # E-mail (EMAIL_PATTERN):
    EMAIL_PATTERN = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    # Telefone (PHONE_PATTERN):
    # - "+" opcional no início, depois dígitos, espaços, parênteses e hífens
    PHONE_PATTERN = re.compile(
        r"^\+?[0-9 ()-]+$"
    )

    # Caracteres especiais permitidos em senhas
    SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?/"

    # ─────────────────────────────────────────────────────────────

    @classmethod
    def validate_password(cls, password: str, language: str = "en") -> Tuple[bool, Optional[List[str]]]:
        """
        Valida uma senha de acordo com critérios de segurança.

        Returns:
            (bool indicando se é válida, lista de mensagens de erro se inválida)
        """
        errors: List[str] = []

        if not password:
            errors.append(get_message("password_empty", language))
        else:
            if len(password) < cls.MIN_PASSWORD_LENGTH:
                errors.append(
                    get_message("password_too_short", language, min=cls.MIN_PASSWORD_LENGTH)
                )
            if len(password.encode("utf-8")) > cls.MAX_PASSWORD_LENGTH:
                errors.append(
                    get_message("password_too_long", language, max=cls.MAX_PASSWORD_LENGTH)
                )
            if not any(c.isupper() for c in password):
                errors.append(get_message("password_missing_uppercase", language))
            if not any(c.islower() for c in password):
                errors.append(get_message("password_missing_lowercase", language))
            if not any(c.isdigit() for c in password):
                errors.append(get_message("password_missing_number", language))
            if not any(c in cls.SPECIAL_CHARACTERS for c in password):
                errors.append(get_message("password_missing_special", language))

        if errors:
            return False, errors

        return True, None

    @classmethod
    def validate_username(cls, username: str, language: str = "en") -> Tuple[bool, Optional[str]]:
        if not username:
            return False, get_message("username_empty", language)

        if len(username) > cls.MAX_USERNAME_LENGTH:
            return False, get_message("field_too_long", language, field="username", max=cls.MAX_USERNAME_LENGTH)

        if not cls.USERNAME_PATTERN.match(username):
            return False, get_message("username_invalid", language)

        return True, None

    @classmethod
    def validate_email(cls, email: str, language: str = "en") -> Tuple[bool, Optional[str]]:
        if not email:
            return False, get_message("email_empty", language)

        if len(email) > cls.MAX_EMAIL_LENGTH:
            return False, get_message("email_too_long", language, max=cls.MAX_EMAIL_LENGTH)

        if not cls.EMAIL_PATTERN.match(email):
            return False, get_message("email_invalid", language)

        return True, None

    @classmethod
    def validate_phone(cls, phone: str, language: str = "en") -> Tuple[bool, Optional[str]]:
        phone = (phone or "").strip()
        if not phone:
            return False, get_message("phone_empty", language)

        if not cls.PHONE_PATTERN.match(phone):
            return False, get_message("phone_invalid", language)

        digits = sum(1 for c in phone if c.isdigit())
        if digits < cls.MIN_PHONE_DIGITS or digits > cls.MAX_PHONE_DIGITS:
            return False, get_message(
                "phone_digits", language, min=cls.MIN_PHONE_DIGITS, max=cls.MAX_PHONE_DIGITS
            )

        return True, None
