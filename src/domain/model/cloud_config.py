"""Cloud sync configuration value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CloudConfig:
    """Where the remote dictionary API lives and the passphrase for writes."""
    api_base_url: str
    passphrase: str = ''

    @property
    def base_url(self) -> str:
        """Base URL trimmed and without a trailing slash."""
        trimmed = self.api_base_url.strip()
        return trimmed[:-1] if trimmed.endswith('/') else trimmed

    def to_dict(self) -> dict:
        return {'apiBaseUrl': self.api_base_url, 'passphrase': self.passphrase}

    @classmethod
    def from_dict(cls, data: dict) -> 'CloudConfig | None':
        """Parse a stored config. Returns None when no usable base URL is present."""
        base = data.get('apiBaseUrl') if isinstance(data, dict) else None
        if not isinstance(base, str) or not base.strip():
            return None
        passphrase = data.get('passphrase')
        return cls(api_base_url=base.strip(), passphrase=passphrase if isinstance(passphrase, str) else '')
