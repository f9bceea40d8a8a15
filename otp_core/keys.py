"""
Store Keys
==========
Deterministic, namespaced store keys derived from principal and operation.
"""

CODE_NAMESPACE = "code"
THROTTLE_NAMESPACE = "throttle"

SEND_OPERATION = "send"
VALIDATE_OPERATION = "validate"


def code_key(prefix: str, principal_id: str) -> str:
    """Key holding the live OTP record of a principal."""
    return f"{prefix}:{CODE_NAMESPACE}:{principal_id}"


def throttle_key(prefix: str, operation: str, principal_id: str) -> str:
    """Key holding the attempt counter of one operation for a principal."""
    return f"{prefix}:{THROTTLE_NAMESPACE}:{operation}:{principal_id}"
