"""
Payment Requirements Parser

Decodes a server's machine-readable payment terms from a 402 response.
Terms may travel in a dedicated response header (JSON, or base64 JSON)
and/or in the JSON body; both single-object and array encodings are
accepted, with or without the ``{x402Version, error, accepts}`` envelope.

Unknown fields are never an error: they ride along on the parsed
``PaymentRequirement`` and are echoed back to the server on the paid retry.
"""

import base64
import binascii
import json
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from ..schemas.https import (
    PAYMENT_RESPONSE_HEADER,
    REQUIREMENTS_HEADERS,
    PaymentRequirement,
    SettlementResponse,
)
from .exceptions import MalformedRequirementsError

logger = logging.getLogger(__name__)


def decode_json_header(value: str) -> Any:
    """
    Decode a structured header value.

    Plain JSON is tried first, then standard and URL-safe base64 of JSON.

    Raises:
        ValueError: If the value is neither.
    """
    text = value.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    padded = text + "=" * (-len(text) % 4)
    for decode in (base64.b64decode, base64.urlsafe_b64decode):
        try:
            return json.loads(decode(padded).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValueError):
            continue
    raise ValueError("header value is neither JSON nor base64-encoded JSON")


class PaymentRequirementsParser:
    """
    Extracts ``PaymentRequirement`` entries from a payment-required response.

    Stateless; one instance may serve any number of concurrent negotiations.

    Usage:
        requirements = PaymentRequirementsParser().parse(response)
    """

    def __init__(self, header_names=REQUIREMENTS_HEADERS):
        self._header_names = tuple(header_names)

    def parse(self, response: httpx.Response) -> List[PaymentRequirement]:
        """
        Parse payment requirements from ``response``.

        The header representation is preferred; the body is consulted when no
        header yields requirements, including a header with an empty list.

        Args:
            response: The 402 response.

        Returns:
            List of requirements in server order (may be empty if the server
            sent an explicitly empty list).

        Raises:
            MalformedRequirementsError: If no representation is present, or a
                present representation lacks scheme, network, payTo or
                maxAmountRequired.
        """
        header_problem: Optional[str] = None
        header_empty = False

        for name in self._header_names:
            value = response.headers.get(name)
            if not value:
                continue
            try:
                decoded = decode_json_header(value)
            except ValueError as e:
                header_problem = f"{name}: {e}"
                logger.debug("Ignoring undecodable %s header: %s", name, e)
                continue
            entries = self._entries(decoded)
            if entries:
                return self._validate(entries, source=f"{name} header")
            header_empty = header_empty or entries is not None

        body = self._json_body(response)
        if body is not None:
            entries = self._entries(body)
            if entries is not None:
                return self._validate(entries, source="response body")

        if header_empty:
            return []
        detail = f" ({header_problem})" if header_problem else ""
        raise MalformedRequirementsError(
            f"Payment required but no payment requirements found in headers or body{detail}"
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    @staticmethod
    def _entries(decoded: Any) -> Optional[List[Any]]:
        """Normalize any accepted encoding to a list; None when it carries no terms."""
        if isinstance(decoded, list):
            return decoded
        if isinstance(decoded, dict):
            if "accepts" in decoded:
                accepts = decoded["accepts"]
                if isinstance(accepts, list):
                    return accepts
                if isinstance(accepts, dict):
                    return [accepts]
                return None
            if "scheme" in decoded or "maxAmountRequired" in decoded:
                return [decoded]
        return None

    @staticmethod
    def _validate(entries: List[Any], source: str) -> List[PaymentRequirement]:
        requirements = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise MalformedRequirementsError(
                    f"Requirement #{index} in {source} is not an object"
                )
            try:
                requirements.append(PaymentRequirement.model_validate(entry))
            except ValidationError as e:
                fields = ", ".join(
                    ".".join(str(part) for part in err["loc"]) for err in e.errors()
                )
                raise MalformedRequirementsError(
                    f"Requirement #{index} in {source} is invalid: {fields}"
                ) from e

        logger.debug(
            "Parsed %d payment requirement(s) from %s: %s",
            len(requirements), source,
            ", ".join(f"{r.scheme}/{r.network}/{r.max_amount_required}" for r in requirements),
        )
        return requirements


def decode_settlement(response: httpx.Response) -> Optional[SettlementResponse]:
    """
    Decode the ``X-PAYMENT-RESPONSE`` receipt of a paid response.

    The paid request has already succeeded by the time this runs, so an
    undecodable receipt is logged and reported as None rather than raised.
    """
    value = response.headers.get(PAYMENT_RESPONSE_HEADER)
    if not value:
        return None
    try:
        decoded = decode_json_header(value)
        return SettlementResponse.model_validate(decoded)
    except (ValueError, ValidationError) as e:
        logger.warning("Ignoring undecodable %s header: %s", PAYMENT_RESPONSE_HEADER, e)
        return None
