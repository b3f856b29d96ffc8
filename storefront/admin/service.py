# module storefront.admin.service
"""
Autorisation admin: un seul identifiant global (hash bcrypt + code TOTP) qui émet
un bearer token unique. Chaque nouvelle connexion remplace le token précédent.

L'état vit dans une instance AdminAuthorizer injectée (app.state.authorizer),
jamais dans une variable de module.
"""
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Optional

import bcrypt
import pyotp

from storefront.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    token: str
    issued_at: float


class AdminAuthorizer:
    def __init__(self, password_hash: str, totp_secret: str):
        self._password_hash = password_hash or ""
        self._totp_secret = totp_secret or ""
        self._session: Optional[AdminSession] = None

    @property
    def session(self) -> Optional[AdminSession]:
        return self._session

    def _check_totp(self, code: str) -> bool:
        # Tolère un pas de 30s de dérive d'horloge
        return pyotp.TOTP(self._totp_secret).verify(code, valid_window=1)

    def _check_password(self, password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), self._password_hash.encode("utf-8"))
        except ValueError:
            logger.error("admin.service: ADMIN_SECRET_HASH n'est pas un hash bcrypt valide")
            return False

    def login(self, password: str, totp: str) -> str:
        """
        Vérifie le TOTP puis le mot de passe et émet un nouveau token.
        - Configuration absente: AuthError (aucun login possible)
        - Le token précédent est silencieusement révoqué
        """
        if not self._password_hash or not self._totp_secret:
            logger.warning("admin.service.login refused: ADMIN_SECRET_HASH/ADMIN_TOTP_SECRET manquants")
            raise AuthError("Admin login is not configured")
        if not self._check_totp(totp):
            raise AuthError("Invalid TOTP")
        if not self._check_password(password):
            raise AuthError("Invalid credentials")
        if self._session is not None:
            logger.info("admin.service.login: previous admin session superseded")
        self._session = AdminSession(token=secrets.token_urlsafe(96), issued_at=time.time())
        return self._session.token

    def check(self, token: Optional[str]) -> bool:
        """
        Compare en temps constant. Avant tout login, aucun token n'est valide.
        """
        session = self._session
        if session is None or not token:
            return False
        return secrets.compare_digest(token.encode("utf-8"), session.token.encode("utf-8"))

    def logout(self) -> None:
        self._session = None
