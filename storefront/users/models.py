from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class SignupRequest(BaseModel):
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=6)
    name: Optional[str] = None
    # Identifiant fourni par le fournisseur d'identité (compte sans mot de passe local)
    id: Optional[str] = None


class UserCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = Role.CUSTOMER


class RoleUpdateRequest(BaseModel):
    role: Role


# Colonnes exposées (jamais le hash du mot de passe)
PUBLIC_USER_COLUMNS = "id, name, email, role, created_at"

def public_user(row: dict) -> dict:
    return {k: row.get(k) for k in ("id", "name", "email", "role", "created_at")}
