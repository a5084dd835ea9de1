from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from harness.core.config import Settings, settings as default_settings
from harness.core.errors import ConfigurationError


@dataclass(frozen=True)
class CredentialPair:
    structure_id: str
    secret_key: str
    public_key: str


class CredentialTable:
    """immutable per-tenant key table, built once at startup."""

    def __init__(self, pairs: List[CredentialPair]):
        self._pairs: Dict[str, CredentialPair] = {p.structure_id: p for p in pairs}

    def get(self, structure_id: str) -> CredentialPair:
        pair = self._pairs.get(structure_id)
        if pair is None:
            raise ConfigurationError(f"Unknown account structure: {structure_id!r}")
        return pair

    def __contains__(self, structure_id: object) -> bool:
        return structure_id in self._pairs

    def __iter__(self) -> Iterator[CredentialPair]:
        return iter(self._pairs.values())

    def __len__(self) -> int:
        return len(self._pairs)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CredentialTable":
        """
        Build the table from env-backed settings.

        Tenants with neither key set are skipped; a tenant with only one of
        the two keys is a misconfiguration.
        """
        settings = settings or default_settings
        pairs = []
        for structure_id, (secret_key, public_key) in settings.TENANT_KEYS.items():
            if not secret_key and not public_key:
                continue
            if not secret_key or not public_key:
                raise ConfigurationError(
                    f"Account structure {structure_id!r} needs both a secret and a public key"
                )
            pairs.append(CredentialPair(structure_id, secret_key, public_key))
        return cls(pairs)
