# namedtimers/core/ids.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

import secrets
import string

ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH = 8


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """
    Return a short random identifier made of ASCII letters and digits.

    :param length: Number of characters, must be positive.
    """
    if length <= 0:
        raise ValueError("Identifier length must be positive")
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))
