"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers, hypercorn) importe `storefront.asgi:app`.
- Toute la configuration (routes, middlewares, collaborateurs injectés) est centralisée
  dans storefront.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
- TLS: à terminer côté proxy ou via uvicorn --ssl-keyfile/--ssl-certfile.
"""

from storefront.app import app

__all__ = ["app"]
