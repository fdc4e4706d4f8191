"""
Appels REST /auth/* (réponses brutes, sans normalisation métier).
"""
from typing import Any, Dict

# module akeditz.auth.repository
def register(client, payload: Dict[str, Any]) -> Any:
    return client.post("/auth/register", json=payload)

def login(client, email: str, password: str) -> Any:
    return client.post("/auth/login", json={"email": email, "password": password})

def get_current_user(client) -> Any:
    return client.get("/auth/me")

def update_profile(client, payload: Dict[str, Any]) -> Any:
    return client.put("/auth/profile", json=payload)

def change_password(client, current_password: str, new_password: str) -> Any:
    return client.put(
        "/auth/change-password",
        json={"currentPassword": current_password, "newPassword": new_password},
    )

def logout(client) -> Any:
    return client.post("/auth/logout")

def forgot_password(client, email: str) -> Any:
    return client.post("/auth/forgot-password", json={"email": email})

def reset_password(client, token: str, password: str) -> Any:
    return client.post(f"/auth/reset-password/{token}", json={"password": password})

def validate_reset_token(client, token: str) -> Any:
    return client.get(f"/auth/validate-reset-token/{token}")
