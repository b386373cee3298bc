from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from fastapi import Depends, status

from app.features.qr.services.encoder import EncodingFailure, UrlEncoder, get_encoder
from app.features.qr.services.resolver import DomainResolver, get_resolver
from app.platform.logger import get_logger
from app.platform.utils.url_validator import (
    Invalid,
    ValidationError,
    extract_hostname,
    validate_url,
)

logger = get_logger(__name__)


class PipelineError(str, Enum):
    INVALID_URL = "invalid_url"
    EMPTY_INPUT = "empty_input"
    MALFORMED_FORMAT = "malformed_format"
    DISALLOWED_TLD = "disallowed_tld"
    DOMAIN_UNRESOLVABLE = "domain_unresolvable"
    ENCODING_FAILURE = "encoding_failure"

    @property
    def status_code(self) -> int:
        if self is PipelineError.ENCODING_FAILURE:
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        return status.HTTP_400_BAD_REQUEST

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    PipelineError.INVALID_URL: "Invalid URL",
    PipelineError.EMPTY_INPUT: "Invalid URL format",
    PipelineError.MALFORMED_FORMAT: "Invalid URL format",
    PipelineError.DISALLOWED_TLD: "Invalid URL format",
    PipelineError.DOMAIN_UNRESOLVABLE: "Domain does not exist",
    PipelineError.ENCODING_FAILURE: "QR generation failed",
}

VALIDATION_ERRORS = {
    ValidationError.EMPTY: PipelineError.EMPTY_INPUT,
    ValidationError.MALFORMED_FORMAT: PipelineError.MALFORMED_FORMAT,
    ValidationError.DISALLOWED_TLD: PipelineError.DISALLOWED_TLD,
}


@dataclass(frozen=True)
class Success:
    data_url: str


@dataclass(frozen=True)
class Failure:
    error: PipelineError


PipelineResult = Union[Success, Failure]


class QrPipeline:
    """
    Runs validate -> resolve -> encode for one request.

    Every stage either hands a new value to the next one or ends the
    request with a Failure. Nothing is retried.
    """

    def __init__(self, resolver: DomainResolver, encoder: UrlEncoder):
        self.resolver = resolver
        self.encoder = encoder

    async def run(self, raw: Any) -> PipelineResult:
        if not isinstance(raw, str):
            logger.info(f"Rejected non-text url field of type {type(raw).__name__}")
            return Failure(PipelineError.INVALID_URL)

        result = validate_url(raw)
        if isinstance(result, Invalid):
            logger.info(f"Rejected url {raw!r}: {result.reason.value}")
            return Failure(VALIDATION_ERRORS[result.reason])

        url = result.url
        hostname = extract_hostname(url)
        if not hostname:
            logger.info(f"Could not extract hostname from {url!r}")
            return Failure(PipelineError.MALFORMED_FORMAT)

        if not await self.resolver.domain_exists(hostname):
            logger.info(f"Domain {hostname} does not resolve")
            return Failure(PipelineError.DOMAIN_UNRESOLVABLE)

        try:
            data_url = await self.encoder.encode(url)
        except EncodingFailure as e:
            logger.error(f"QR generation failed for {url!r}: {e}")
            return Failure(PipelineError.ENCODING_FAILURE)
        except Exception:
            logger.exception(f"Encoder raised unexpectedly for {url!r}")
            return Failure(PipelineError.ENCODING_FAILURE)

        logger.info(f"Generated QR code for {url}")
        return Success(data_url)


def get_pipeline(
    resolver: DomainResolver = Depends(get_resolver),
    encoder: UrlEncoder = Depends(get_encoder),
) -> QrPipeline:
    return QrPipeline(resolver=resolver, encoder=encoder)
