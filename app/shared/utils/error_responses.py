# app/shared/utils/error_responses.py

"""OpenAPI documentation of the error bodies produced by ErrorHandlerMiddleware."""


def _error_example(message: str, code: str, details=None) -> dict:
    return {"success": False, "error": message, "code": code, "details": details}


# Respostas de erro genéricas
common_errors = {
    500: {
        "description": "Internal server error",
        "content": {
            "application/json": {
                "example": _error_example("Internal server error.", "INTERNAL_SERVER_ERROR")
            }
        }
    }
}

# Erros de autenticação (tokens)
token_errors = {
    401: {
        "description": "Unauthorized (missing or invalid token)",
        "content": {
            "application/json": {
                "examples": {
                    "missing_token": {
                        "summary": "Missing Token",
                        "value": _error_example("No token provided.", "AUTH_TOKEN_MISSING")
                    },
                    "invalid_token": {
                        "summary": "Invalid Token",
                        "value": _error_example("Invalid token.", "AUTH_TOKEN_INVALID")
                    },
                }
            }
        }
    },
    **common_errors
}

# Erros do login
auth_errors = {
    400: {
        "description": "Bad Request (missing username or password)",
        "content": {
            "application/json": {
                "example": _error_example(
                    "Invalid request data.",
                    "VALIDATION_ERROR",
                    [{"loc": ["body", "password"], "msg": "Field required", "type": "missing"}],
                )
            }
        }
    },
    401: {
        "description": "Unauthorized (unknown user and wrong password look the same)",
        "content": {
            "application/json": {
                "example": _error_example("Invalid credentials.", "AUTH_INVALID_CREDENTIALS")
            }
        }
    },
    **common_errors
}

# Erros de rotas restritas por papel
permission_errors = {
    **token_errors,
    403: {
        "description": "Forbidden (role not allowed)",
        "content": {
            "application/json": {
                "example": _error_example("Insufficient permissions.", "AUTH_INSUFFICIENT_PERMISSIONS")
            }
        }
    },
}
