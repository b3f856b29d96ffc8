import sys

import bcrypt
import pyotp

def generate_hash(password: str) -> str:
    # Génère un hash bcrypt avec salt auto
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python generate_hash.py <mot de passe admin>")
        sys.exit(1)
    totp_secret = pyotp.random_base32()
    print(f"ADMIN_SECRET_HASH={generate_hash(sys.argv[1])}")
    print(f"ADMIN_TOTP_SECRET={totp_secret}")
    print(f"URI: {pyotp.TOTP(totp_secret).provisioning_uri(name='admin', issuer_name='Storefront')}")
