# module storefront.app
import logging

from storefront.config import LOG_LEVEL
from storefront.app_setup.factory import create_app

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# App globale
app = create_app()
