from fastapi import Request, Depends
from typing import Optional

from storefront.errors import AuthError

def get_authorizer(request: Request):
    return request.app.state.authorizer

def get_bearer_token(request: Request) -> Optional[str]:
    """
    Lit le token admin depuis l'en-tête Authorization ("Bearer <token>").
    Tout autre schéma est ignoré (non authentifié).
    """
    auth_header = (request.headers.get("Authorization") or "").strip()
    if not auth_header.lower().startswith("bearer "):
        return None
    return auth_header[7:].strip() or None

def require_admin(request: Request, authorizer=Depends(get_authorizer)) -> str:
    token = get_bearer_token(request)
    if not token:
        raise AuthError("Non authentifié")
    if not authorizer.check(token):
        raise AuthError("Session admin invalide ou remplacée")
    return token
