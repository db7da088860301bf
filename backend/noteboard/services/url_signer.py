"""
NoteBoard — Signed Object URLs
===============================

What:  Issues and verifies time-limited URLs for blobs kept by LocalBlobStore.
How:   itsdangerous URLSafeTimedSerializer signs the object key together with
       its issue time; verify() loads the token with max_age and checks the
       signed key matches the requested one.
Who:   LocalBlobStore.get() signs; the GET /storage/{key} route verifies.

URL shape:
    {public_base_url}/storage/{quoted key}?token=<signed key + timestamp>
"""

import time
from typing import Callable
from urllib.parse import quote, urlencode

from itsdangerous import BadSignature, TimestampSigner, URLSafeTimedSerializer

SALT = "blob-url"


def _signer_with_clock(clock: Callable[[], float]) -> type:
    class ClockedTimestampSigner(TimestampSigner):
        def get_timestamp(self) -> int:
            return int(clock())

    return ClockedTimestampSigner


class URLSigner:
    def __init__(
        self,
        secret: str,
        expires_seconds: int = 900,
        base_url: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self.expires_seconds = expires_seconds
        self.base_url = base_url.rstrip("/")
        self._serializer = URLSafeTimedSerializer(
            secret, salt=SALT, signer=_signer_with_clock(clock)
        )

    def sign(self, key: str) -> str:
        """Return a URL for `key` valid for `expires_seconds` from now."""
        query = urlencode({"token": self._serializer.dumps(key)})
        return f"{self.base_url}/storage/{quote(key)}?{query}"

    def verify(self, key: str, token: str) -> bool:
        """True when the token was issued for `key` and has not expired."""
        try:
            signed_key = self._serializer.loads(token, max_age=self.expires_seconds)
        except BadSignature:
            # SignatureExpired is a BadSignature
            return False
        return signed_key == key
