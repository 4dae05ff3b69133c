"""
Two-factor (TOTP) engine.

Stateless helpers around pyotp: secret generation, provisioning URIs for
authenticator apps, and code verification with one step of clock-skew
tolerance in either direction.
"""

import binascii
from datetime import datetime
from typing import Optional, Union
from urllib.parse import quote, urlencode

import pyotp

SECRET_BYTES = 20  # 160 bits before base32 encoding
TOTP_DIGITS = 6
TOTP_INTERVAL = 30
TOTP_VALID_WINDOW = 1


class TwoFactorSecretError(ValueError):
    """Raised when a stored secret is missing or not valid base32.

    This is a provisioning bug, not a wrong code, and must not be reported to
    the user as a failed verification.
    """


def generate_secret() -> str:
    """Fresh random base32 secret (32 characters, 20 bytes of entropy)"""
    return pyotp.random_base32(length=SECRET_BYTES * 8 // 5)


def build_enrollment_uri(secret: str, account_label: str, issuer: str) -> str:
    """
    Build the otpauth:// URI an authenticator app scans.

    The period and digit count are always written out, even though they are
    the defaults most apps assume.
    """
    label = quote(f"{issuer}:{account_label}", safe="@:")
    params = urlencode(
        {
            "secret": secret,
            "issuer": issuer,
            "period": TOTP_INTERVAL,
            "digits": TOTP_DIGITS,
        },
        quote_via=quote,
    )
    return f"otpauth://totp/{label}?{params}"


def _totp(secret: Optional[str]) -> pyotp.TOTP:
    if not secret:
        raise TwoFactorSecretError("Two-factor secret is not provisioned")
    totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
    try:
        totp.byte_secret()
    except (binascii.Error, ValueError) as exc:
        raise TwoFactorSecretError("Two-factor secret is not valid base32") from exc
    return totp


def generate_code(secret: str, for_time: Union[datetime, int, None] = None) -> str:
    """Code valid for the step containing ``for_time`` (default: now)"""
    totp = _totp(secret)
    if for_time is None:
        return totp.now()
    return totp.at(for_time)


def verify_code(
    secret: Optional[str],
    submitted_code: Optional[str],
    for_time: Union[datetime, int, None] = None,
) -> bool:
    """
    Check a submitted code against the current step and one step either side.

    Whitespace anywhere in the submission is ignored. An empty submission is
    simply wrong. Comparison is constant-time (pyotp uses
    hmac.compare_digest).

    Raises:
        TwoFactorSecretError: the secret is missing or malformed
    """
    totp = _totp(secret)
    normalized = "".join((submitted_code or "").split())
    if not normalized:
        return False
    return totp.verify(normalized, for_time=for_time, valid_window=TOTP_VALID_WINDOW)
