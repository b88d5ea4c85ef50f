"""
Utilities for safe logging of payroll subjects and errors
"""

import hashlib
import re
from typing import Union


def mask_name(full_name: str) -> str:
    """
    Masks full name for safe logging

    Args:
        full_name: Full name to mask

    Returns:
        Initials (e.g., M.P.); single-token names keep only the first character
    """
    if not full_name or not full_name.strip():
        return "[no_name]"

    parts = full_name.strip().split()
    if len(parts) == 1:
        return f"{parts[0][0]}."
    return f"{parts[0][0]}.{parts[1][0]}."


def public_emp_id(employee_id: Union[int, str], salt: str = "clinicpay_emp") -> str:
    """
    Create safe public employee identifier for logging

    Args:
        employee_id: Worker or physician ID
        salt: Salt for hashing to prevent reverse lookup

    Returns:
        Safe public employee identifier (emp_1a2b3c4d5e6f)
    """
    if employee_id is None or employee_id == "":
        return "emp_anon"

    hash_input = f"{salt}:{employee_id}"
    hash_obj = hashlib.blake2b(hash_input.encode(), digest_size=6)
    return f"emp_{hash_obj.hexdigest()}"


def err_tag(exc: BaseException) -> str:
    """
    Extract safe error tag from exception for logging

    Args:
        exc: Exception instance

    Returns:
        Safe error tag with sanitized message content
    """
    # Check if exception has safe message attributes
    for attr in ("safe_message", "public_message"):
        msg = getattr(exc, attr, None)
        if msg:
            return str(msg)[:120]

    text = str(exc)

    # Simple sanitization from emails and long tokens
    text = re.sub(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", "***@***", text)
    text = re.sub(r"\b(?:Bearer\s+)?[A-Za-z0-9._-]{16,}\b", "****", text)

    # Limit length
    return text[:120] if text.strip() else exc.__class__.__name__
