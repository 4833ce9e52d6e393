"""Storefront base URLs resolved once from configuration."""

from dataclasses import dataclass

from src.storefront.runtime.config.config_data import ConfigData


@dataclass(frozen=True)
class StorefrontUrls:
    """Public storefront links used in catalog views.

    The homologation site is used outside production and whenever debug is
    on; the ``http`` variant is the ``https`` one with the scheme downgraded.
    """

    https: str

    @property
    def http(self) -> str:
        return self.https.replace("https", "http")

    @classmethod
    def from_config(cls, config: ConfigData) -> "StorefrontUrls":
        storefront = config.storefront
        use_homologation = config.app.environment != "production" or config.app.debug
        base = storefront.homologation_url if use_homologation else storefront.production_url
        return cls(https=base)

    def links(self, path: str) -> dict[str, str]:
        """``{http, https}`` pair for ``path`` under the storefront root."""
        return {"http": f"{self.http}{path}", "https": f"{self.https}{path}"}
