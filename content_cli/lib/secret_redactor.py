"""Credential redaction utilities.

Removes access tokens and client secrets before anything reaches the logs.
"""

import re
from typing import Optional


class SecretRedactor:
    """Redact credentials from text before logging."""

    PATTERNS = {
        'bearer': r'\bBearer\s+[A-Za-z0-9\-._~+/]+=*',
        'client_secret': r'(client_secret["\']?\s*[=:]\s*["\']?)[^\s&"\',]+',
        'access_token': r'(access_token["\']?\s*[=:]\s*["\']?)[^\s&"\',]+',
        'pat_token': r'(pat_token["\']?\s*[=:]\s*["\']?)[^\s&"\',]+',
    }

    @classmethod
    def redact(cls, text: Optional[str]) -> str:
        """
        Redact credentials from text.

        Args:
            text: Text to redact

        Returns:
            Redacted text with secrets replaced by [TYPE_REDACTED]
        """
        if not text:
            return ""

        result = text
        for name, pattern in cls.PATTERNS.items():
            if name == 'bearer':
                result = re.sub(pattern, 'Bearer [BEARER_REDACTED]', result)
            else:
                result = re.sub(pattern, rf'\1[{name.upper()}_REDACTED]', result, flags=re.IGNORECASE)

        return result

    @classmethod
    def contains_secret(cls, text: Optional[str]) -> bool:
        """Check if text contains any credential patterns."""
        if not text:
            return False

        for pattern in cls.PATTERNS.values():
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False
