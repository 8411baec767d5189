"""Request payload access and lazy JSON decoding."""
from dataclasses import dataclass
from functools import cached_property
from typing import Any

import orjson

from ..errors import DecodeFailure
from ..models import IncomingRequest


@dataclass(frozen=True)
class Decoded:
    """Parsed payload tree, or the failure that prevented parsing."""

    tree: Any = None
    failure: DecodeFailure | None = None


class PayloadDecoder:
    """
    Per-request payload holder.

    The payload string and its decoded tree are each computed once.
    """

    def __init__(self, incoming: IncomingRequest):
        self.incoming = incoming

    @cached_property
    def payload(self) -> str | None:
        """
        The raw payload string.

        A non-blank ``payload`` form field wins over the request body;
        a blank body means there is no payload at all.
        """
        form_payload = self.incoming.form_payload
        if form_payload and form_payload.strip():
            return form_payload

        body = self.incoming.body.decode("utf-8", errors="replace")
        if body.strip():
            return body

        return None

    @cached_property
    def decoded(self) -> Decoded:
        if self.payload is None:
            return Decoded(failure=DecodeFailure("No payload to decode"))

        try:
            return Decoded(tree=orjson.loads(self.payload))
        except orjson.JSONDecodeError as e:
            failure = DecodeFailure(f"Payload is not valid JSON: {e}")
            failure.__cause__ = e
            return Decoded(failure=failure)
