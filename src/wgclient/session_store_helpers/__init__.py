"""Helper modules for the persistent session store."""

from .metadata_file import SessionMetadata, SessionMetadataFile
from .secret_vault import SecretVault

__all__ = ["SecretVault", "SessionMetadata", "SessionMetadataFile"]
