"""
Helpers communs aux repositories Supabase.
"""
from typing import Any, Optional
from postgrest.exceptions import APIError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

def api_error_code(exc: Exception) -> Optional[str]:
    """Code Postgres d'une APIError PostgREST (ex: '23505'), None sinon."""
    if not isinstance(exc, APIError):
        return None
    code = getattr(exc, "code", None)
    if code:
        return str(code)
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0].get("code")
    return None

def first_row(data: Any) -> Optional[dict]:
    """Normalise res.data (liste ou dict) en une seule ligne."""
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data or None
    return None
