# ==============================================================================
# SESSION TOKENS
# ==============================================================================
# Stateless signed tokens: itsdangerous timestamp signer (HMAC over the
# server secret key). Payload {id, username, role}; the issuance timestamp
# is part of the signature and the verifier rejects tokens older than the
# configured window (2 hours by default). Nothing is stored server-side.
# ==============================================================================

from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from api_ecommerce.errors import Forbidden, Unauthenticated


class TokenService:
    """Issues and verifies session tokens."""

    SALT = 'api-ecommerce.session-token'

    def __init__(self, secret_key: str, ttl_seconds: int):
        """
        Args:
            secret_key: Server signing key (read-only after startup)
            ttl_seconds: Validity window of a token
        """
        self.ttl_seconds = ttl_seconds
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)

    def issue(self, user_id: int, username: str, role: Optional[str]) -> str:
        return self._serializer.dumps({'id': user_id, 'username': username, 'role': role})

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Checks signature and age of a token.

        Returns:
            The claims {id, username, role}

        Raises:
            Unauthenticated: Missing, tampered, malformed or expired token
        """
        if not token:
            raise Unauthenticated('Missing session token')
        try:
            claims = self._serializer.loads(token, max_age=self.ttl_seconds)
        except SignatureExpired:
            raise Unauthenticated('Session token expired')
        except BadSignature:
            raise Unauthenticated('Invalid session token')
        if not isinstance(claims, dict) or 'id' not in claims:
            raise Unauthenticated('Invalid session token')
        return claims

    def authorize(self, token: str, required_role: Optional[str] = None) -> Dict[str, Any]:
        """
        Verifies a token and, if requested, its role claim.

        Raises:
            Unauthenticated: Bad, missing or expired token
            Forbidden: Role claim does not match required_role
        """
        claims = self.verify(token)
        if required_role and claims.get('role') != required_role:
            raise Forbidden(f'Role {required_role} required')
        return claims
