# qrscan/unlock.py

from __future__ import annotations

from typing import Optional

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

UNLOCK_HEADER = "X-Unlock-Token"
UNLOCK_MAX_AGE = 5 * 60  # 5 minutes, same window as the on-device biometric prompt


class UnlockGate:
    """
    Signed, short-lived unlock tokens guarding scan history.

    The device performs the biometric check and calls /unlock; the issued
    token then authorizes history/favorites calls for UNLOCK_MAX_AGE seconds.
    With `required=False` every request is let through.
    """

    def __init__(self, secret_key: str, required: bool = True, max_age: int = UNLOCK_MAX_AGE):
        self.required = required
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret_key, salt="qrscan-unlock-v1")

    def issue(self, user_id: int) -> str:
        return self._serializer.dumps({"uid": user_id})

    def verify(self, token: Optional[str]) -> Optional[int]:
        """Return the unlocked user id, or None for a missing/bad/expired token."""
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None
        uid = data.get("uid") if isinstance(data, dict) else None
        return uid if isinstance(uid, int) else None

    def allows(self, token: Optional[str], user_id: Optional[int] = None) -> bool:
        if not self.required:
            return True
        uid = self.verify(token)
        if uid is None:
            return False
        return user_id is None or uid == user_id
