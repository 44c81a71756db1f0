from .keyring_store import SERVICE_NAME, KeyringSecretStore

__all__ = ["SERVICE_NAME", "KeyringSecretStore"]
