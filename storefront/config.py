# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Stripe, Coinbase, Supabase, admin)
- Décrit les capacités du pipeline de checkout (providers actifs, variantes,
  politique de prix du stockage, pays de livraison)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

def _csv(name: str, default: str) -> list:
    return [p.strip() for p in os.getenv(name, default).split(",") if p.strip()]

# Catalogue: backend de stockage ("file", "memory", "supabase")
CATALOG_BACKEND = _clean_env(os.getenv("CATALOG_BACKEND") or "file").lower()
CATALOG_PATH = Path(_clean_env(os.getenv("CATALOG_PATH") or str(BASE_DIR / "data" / "products.json")))
# Devise de base du catalogue: toute la tarification checkout se fait dans cette devise
CATALOG_CURRENCY = _clean_env(os.getenv("CATALOG_CURRENCY") or "usd").lower()

# Checkout: providers actifs, variantes, politique de prix du stockage
CHECKOUT_PROVIDERS = [p.lower() for p in _csv("CHECKOUT_PROVIDERS", "stripe")]
VARIANTS_ENABLED = _flag("VARIANTS_ENABLED", "false")
# "replace": le prix du stockage remplace le prix de base; "additive": il s'y ajoute
STORAGE_PRICING = _clean_env(os.getenv("STORAGE_PRICING") or "replace").lower()
SHIPPING_COUNTRIES = [c.upper() for c in _csv("SHIPPING_COUNTRIES", "US")]
PROVIDER_TIMEOUT_SECONDS = float(_clean_env(os.getenv("PROVIDER_TIMEOUT_SECONDS") or "5"))

# Pages de succès/annulation du checkout
BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000").rstrip("/")
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/success/")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/cancel/")

# Stripe
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")

# Coinbase Commerce
COINBASE_API_KEY = _clean_env(os.getenv("COINBASE_API_KEY") or "")
COINBASE_API_URL = _clean_env(os.getenv("COINBASE_API_URL") or "https://api.commerce.coinbase.com").rstrip("/")

# Conversion de devises (affichage uniquement)
CURRENCY_API_URL = _clean_env(os.getenv("CURRENCY_API_URL") or "https://open.er-api.com/v6/latest").rstrip("/")

# Admin: hash bcrypt du mot de passe et secret TOTP (base32)
ADMIN_SECRET_HASH = _clean_env(os.getenv("ADMIN_SECRET_HASH", ""))
ADMIN_TOTP_SECRET = _clean_env(os.getenv("ADMIN_TOTP_SECRET", ""))

# Supabase (backend catalogue "supabase")
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")
SUPABASE_PRODUCTS_TABLE = _clean_env(os.getenv("SUPABASE_PRODUCTS_TABLE") or "products")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Sécurité / CORS
COOKIE_SECURE = _flag("COOKIE_SECURE", "false")
CORS_ORIGINS = _csv("CORS_ORIGINS", "*")
ALLOWED_HOSTS = _csv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")

LOG_LEVEL = _clean_env(os.getenv("LOG_LEVEL") or "info").lower()
