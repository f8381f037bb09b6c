"""JWT authentication provider implementation.

Supports identity-provider JWTs signed with an asymmetric key (RS256/ES256,
verified against the provider's JWKS) and locally-created tokens (HS256 with
the shared secret, used by tests and internal callers).

Identity provider payload structure:
    {
        "sub": "user_2abcDEFghiJKLmnop",
        "email": "user@example.com",
        "name": "Jane",
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(jwks_url: str) -> dict[str, Any]:
    """Fetch and cache JWKS keys from the identity provider."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("jwks_fetch_failed", jwks_url=jwks_url)
        return {}

    # Build a kid -> key mapping
    _jwks_cache = {}
    for key_data in jwks_data.get("keys", []):
        kid = key_data.get("kid")
        if kid:
            _jwks_cache[kid] = key_data
    logger.info("jwks_fetched", key_count=len(_jwks_cache))
    return _jwks_cache


def clear_jwks_cache() -> None:
    """Drop cached JWKS keys so the next validation refetches them."""
    global _jwks_cache
    _jwks_cache = None


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks_url: str = settings.auth_jwks_url,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks_url = jwks_url

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the caller's identity.

        Detects the signing algorithm from the token header:
        - RS256/ES256: validates via the JWKS public key matching ``kid``
        - anything else: validates via the shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg in ASYMMETRIC_ALGORITHMS:
                payload = await self._validate_with_jwks(token, header, alg)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            subject = payload.get("sub")
            if not subject or not str(subject).strip():
                return None

            user_metadata = payload.get("user_metadata") or {}
            display_name = (
                user_metadata.get("display_name")
                or payload.get("name")
                or payload.get("full_name")
            )

            return TokenUser(
                external_id=str(subject),
                email=payload.get("email"),
                display_name=display_name,
            )

        except JWTError:
            return None

    async def _validate_with_jwks(
        self, token: str, header: dict, alg: str
    ) -> Optional[dict]:
        """Validate an asymmetrically signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys(self._jwks_url)
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Key not found, refetch once in case the provider rotated keys
            clear_jwks_cache()
            jwks_keys = await _get_jwks_keys(self._jwks_url)
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("jwks_key_not_found", kid=kid)
                return None

        return jwt.decode(
            token,
            key_data,
            algorithms=[alg],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.external_id,
            "exp": expire,
        }
        if user.email:
            payload["email"] = user.email
        if user.display_name:
            payload["name"] = user.display_name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
