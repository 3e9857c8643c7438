"""Credential module."""
from credentials.gate import ApiKeyStore, CredentialGate
from credentials.models import CredentialState

__all__ = [
    "ApiKeyStore",
    "CredentialGate",
    "CredentialState"
]
