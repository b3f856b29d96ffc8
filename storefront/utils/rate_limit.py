from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import os
import time
import hashlib

from storefront.utils.security import get_bearer_token

def _client_key(req: Request) -> str:
    # Priorité: token admin (hashé) s'il est valide, sinon IP, toujours par chemin.
    # Un en-tête Authorization non vérifié ne doit jamais ouvrir un nouveau compteur.
    path = req.url.path
    token = get_bearer_token(req)
    authorizer = getattr(req.app.state, "authorizer", None)
    if token and authorizer is not None and authorizer.check(token):
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"admin:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        async def _identifier(req: Request) -> str:
            return _client_key(req)
        try:
            from fastapi_limiter.depends import RateLimiter
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, Response())
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible en cours de route: pas de 429 en prod
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = False
    backend = None
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
        backend = "redis" if limiter_ready else None
    except ImportError:
        limiter_ready = False
        backend = None
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        backend = backend or "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    if backend == "redis":
        from urllib.parse import urlparse
        redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
        if redis_url:
            p = urlparse(redis_url)
            info["redis"] = {
                "scheme": p.scheme,
                "host": p.hostname,
                "port": p.port,
            }

    return info
