"""Reversible text encoding of face descriptors for storage and transit.

A token is ``<timestamp>:<payload>`` where ``timestamp`` is the encoding time
in milliseconds written in base 36 and ``payload`` is the standard base64
encoding of the descriptor as a JSON array. Neither alphabet contains ``:``.

Floats are written with their shortest round-trip representation, so
``decode(encode(v)) == v`` holds exactly.

This is an encoding, not encryption.
"""
import base64
import json
import math
import time
from typing import List, Optional

from faceauth.core.exceptions import MalformedTokenError
from faceauth.services.vector_math import DescriptorLike, as_descriptor

DELIMITER = ":"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class DescriptorCodec:
    """Encodes descriptors to tokens and back."""

    @staticmethod
    def encode(descriptor: DescriptorLike, timestamp_ms: Optional[int] = None) -> str:
        """Encode a descriptor as a token.

        Args:
            descriptor: Descriptor to encode
            timestamp_ms: Marker to embed; defaults to the current time

        Returns:
            str: Token of the form ``<base36 timestamp>:<base64 JSON>``

        Raises:
            InvalidDescriptorError: If the value is not a descriptor
        """
        values = as_descriptor(descriptor).tolist()
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        payload = base64.b64encode(json.dumps(values).encode("utf-8")).decode("ascii")
        return f"{_to_base36(timestamp_ms)}{DELIMITER}{payload}"

    @staticmethod
    def decode(token: str) -> List[float]:
        """Decode a token back into a descriptor.

        Args:
            token: Token produced by :meth:`encode`

        Returns:
            List[float]: The original descriptor values

        Raises:
            MalformedTokenError: If the token is not a valid descriptor token
        """
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string")

        parts = token.split(DELIMITER)
        if len(parts) != 2:
            raise MalformedTokenError(
                "Token must contain exactly one delimiter",
                details={"parts": len(parts)},
            )

        marker, payload = parts
        if not marker or any(c not in _BASE36_DIGITS for c in marker):
            raise MalformedTokenError("Token timestamp marker is not base 36")

        try:
            raw = base64.b64decode(payload.encode("ascii"), validate=True)
            values = json.loads(raw.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            raise MalformedTokenError(f"Token payload could not be decoded: {e}")

        if not isinstance(values, list):
            raise MalformedTokenError("Token payload is not a list of numbers")

        descriptor = []
        for value in values:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MalformedTokenError("Token payload is not a list of numbers")
            try:
                number = float(value)
            except OverflowError:
                raise MalformedTokenError("Token payload value is out of range")
            if not math.isfinite(number):
                raise MalformedTokenError("Token payload values must be finite")
            descriptor.append(number)
        return descriptor
