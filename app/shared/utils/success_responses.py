# app/shared/utils/success_responses.py

# Respostas de sucesso genéricas
common_success = {
    200: {
        "description": "Request processed successfully",
        "content": {
            "application/json": {
                "example": {"success": True, "detail": "Operation completed successfully."}
            }
        }
    }
}

# Sucesso de login/refresh (o refresh token vai apenas no cookie HttpOnly)
auth_success = {
    200: {
        "description": "Authenticated. The refresh token is set as an HttpOnly cookie.",
        "content": {
            "application/json": {
                "example": {
                    "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    "expiresAt": "2024-01-01T00:15:00Z",
                    "user": {
                        "id": 1,
                        "username": "instructor01",
                        "role": "instructor",
                        "organizationId": 3,
                        "organizationName": "Red Cross Training Center"
                    }
                }
            }
        }
    }
}
