"""
Gestionnaires d'exceptions: rendu uniforme {"error": message}.
- StorefrontError (ShapeError, BusinessRuleError, ProviderError, AuthError...): status porté par la classe.
- RequestValidationError (paramètres de route/query): 400 au format ShapeError.
- HTTPException Starlette (404/405 du routage, 429 du rate limit): {"error": detail}.
- Toute autre exception: loggée, 500 {"error": "Internal server error"} (jamais de text/plain).
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.errors import StorefrontError, AuthError, ProviderError
from storefront.utils.validators import shape_error_from_details

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        if isinstance(exc, ProviderError):
            # La cause a déjà été loggée par le service; rappel court pour corréler
            logger.warning("provider error path=%s message=%s", request.url.path, exc.message)
        elif isinstance(exc, AuthError):
            logger.info("auth refused path=%s", request.url.path)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        shape = shape_error_from_details(errors[0] if errors else {})
        return JSONResponse(status_code=400, content=shape.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        # Catalogue illisible, Supabase indisponible, configuration invalide...
        logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
