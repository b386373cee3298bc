import asyncio
import socket
from typing import Optional, Protocol

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


class DomainResolver(Protocol):
    async def domain_exists(self, hostname: str) -> bool:
        ...


class DnsResolver:
    """
    Confirms a hostname resolves with a single getaddrinfo lookup.

    Unknown hosts, network failures and timeouts all collapse to False.
    There is no caching and no retry.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = settings.DNS_TIMEOUT_SECONDS if timeout is None else timeout

    async def domain_exists(self, hostname: str) -> bool:
        loop = asyncio.get_running_loop()
        try:
            addresses = await asyncio.wait_for(
                loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"DNS lookup for {hostname} timed out after {self.timeout}s")
            return False
        except (OSError, UnicodeError) as e:
            # socket.gaierror is an OSError
            logger.info(f"DNS lookup for {hostname} failed: {e}")
            return False

        return bool(addresses)


def get_resolver() -> DomainResolver:
    return DnsResolver()
