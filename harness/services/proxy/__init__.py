from .client import ApiProxy, CredentialRoutes

__all__ = ["ApiProxy", "CredentialRoutes"]
