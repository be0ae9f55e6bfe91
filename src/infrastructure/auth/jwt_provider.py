"""JWT authentication provider for organization members.

Admin endpoints accept Supabase-issued access tokens (ES256, verified
against the project's JWKS) and locally signed HS256 tokens, which the
test suite mints with ``create_token``.
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWKSCache:
    """Signing keys of the Supabase project, keyed by ``kid``.

    Keys are fetched lazily and refetched once when an unknown ``kid``
    shows up, which covers key rotation.
    """

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout
        self._keys: dict[str, dict[str, Any]] | None = None

    async def get(self, kid: str) -> dict[str, Any] | None:
        if self._keys is None or kid not in self._keys:
            self._keys = await self._fetch()
        return self._keys.get(kid)

    async def _fetch(self) -> dict[str, dict[str, Any]]:
        if not self._url:
            return {}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                keys = response.json().get("keys", [])
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("jwks_fetch_failed", url=self._url, error=str(exc))
            return {}
        logger.info("jwks_fetched", count=len(keys))
        return {k["kid"]: k for k in keys if k.get("kid")}


_jwks = JWKSCache(settings.supabase_jwks_url)


def _display_name(claims: dict[str, Any]) -> str | None:
    metadata = claims.get("user_metadata") or {}
    return (
        metadata.get("display_name")
        or metadata.get("full_name")
        or metadata.get("name")
        or claims.get("name")
    )


class JWTAuthProvider:
    """IAuthProvider implementation over python-jose."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks: JWKSCache | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks = jwks or _jwks

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's user, or None when it is invalid or expired."""
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                claims = await self._decode_es256(token, header.get("kid"))
            else:
                claims = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError as exc:
            logger.info("jwt_rejected", reason=str(exc))
            return None

        if not claims or not claims.get("sub") or not claims.get("email"):
            return None
        try:
            user_id = UUID(claims["sub"])
        except ValueError:
            return None

        return TokenUser(
            id=user_id,
            email=claims["email"],
            display_name=_display_name(claims),
            role=claims.get("role"),
        )

    async def _decode_es256(self, token: str, kid: str | None) -> Optional[dict[str, Any]]:
        if not kid:
            return None
        key_data = await self._jwks.get(kid)
        if not key_data:
            logger.warning("jwks_key_missing", kid=kid)
            return None
        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Sign a token for ``user`` with the shared secret."""
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "user_metadata": {"display_name": user.display_name},
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
