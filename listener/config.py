import ipaddress
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import AnyUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


class Settings(BaseSettings):
    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # Source validation: comma-separated CIDR ranges, empty disables it
    IP_VALIDATION: bool = False
    VALID_IPS: str = ""
    TRUST_FORWARDED_FOR: bool = False
    # Queue backend: "memory" or "sidekiq"
    QUEUE_ADAPTER: Literal["memory", "sidekiq"] = "memory"
    REDIS_URL: AnyUrl | None = "redis://localhost:6379"
    REDIS_NAMESPACE: str = "sidekiq"
    REDIS_TIMEOUT: float = 5.0
    GATEKEEPER_QUEUE: str = "build_requests"
    GATEKEEPER_WORKER: str = "Travis::Gatekeeper::Worker"
    SYNC_QUEUE: str = "sync.gh_apps"
    SYNC_WORKER: str = "Travis::GithubSync::Worker"
    REDIRECT_URL: str = "https://travis-ci.com"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class ListenerConfig:
    """Read-only configuration handed to the request-handling core."""

    valid_ips: tuple[IPNetwork, ...] = ()
    ip_validation: bool = False
    gatekeeper_queue: str = "build_requests"
    sync_queue: str = "sync.gh_apps"

    @classmethod
    def build(
        cls,
        valid_ips: str | list[str] = "",
        ip_validation: bool = False,
        gatekeeper_queue: str = "build_requests",
        sync_queue: str = "sync.gh_apps",
    ) -> "ListenerConfig":
        """
        Build a config, parsing the allow-list into networks.

        Raises:
            ConfigurationError: If any configured range is not a valid CIDR
        """
        return cls(
            valid_ips=parse_networks(valid_ips),
            ip_validation=ip_validation,
            gatekeeper_queue=gatekeeper_queue,
            sync_queue=sync_queue,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListenerConfig":
        return cls.build(
            valid_ips=settings.VALID_IPS,
            ip_validation=settings.IP_VALIDATION,
            gatekeeper_queue=settings.GATEKEEPER_QUEUE,
            sync_queue=settings.SYNC_QUEUE,
        )


def parse_networks(ranges: str | list[str]) -> tuple[IPNetwork, ...]:
    if isinstance(ranges, str):
        ranges = ranges.split(",")

    networks = []
    for entry in ranges:
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError as e:
            raise ConfigurationError(f"Invalid CIDR range in VALID_IPS: {entry!r}") from e
    return tuple(networks)
