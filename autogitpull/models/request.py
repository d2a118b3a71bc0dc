"""
Request Models

A RequestContext describes one invocation of the deployer. It is built once by
whoever received the trigger (the CLI or the HTTP adapter) and never read from
process-wide state.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from autogitpull.constants import (
    CDN_IP_HEADER,
    FORWARDED_FOR_HEADER,
    HEADER_PREFIX,
    PAYLOAD_FIELD,
)


class Origin(Enum):
    """Where a deployment trigger came from."""

    DIRECT = "direct"
    NETWORKED = "networked"


def headers_to_meta(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Convert HTTP header names into CGI-style meta-variable keys.

    'X-Forwarded-For' becomes 'HTTP_X_FORWARDED_FOR'.
    """
    meta = {}
    for name, value in headers.items():
        key = HEADER_PREFIX + name.upper().replace("-", "_")
        meta[key] = value
    return meta


@dataclass(frozen=True)
class RequestContext:
    """One deployment invocation."""

    origin: Origin
    remote_addr: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def direct(cls) -> "RequestContext":
        """Context for a trusted command-line invocation."""
        return cls(origin=Origin.DIRECT)

    @classmethod
    def networked(
        cls,
        remote_addr: Optional[str],
        headers: Optional[Mapping[str, str]] = None,
        form: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
    ) -> "RequestContext":
        """Context for a trigger received over the network."""
        return cls(
            origin=Origin.NETWORKED,
            remote_addr=remote_addr,
            headers=dict(headers or {}),
            form=dict(form or {}),
            body=body or b"",
        )

    @property
    def is_direct(self) -> bool:
        return self.origin == Origin.DIRECT

    def resolve_caller_address(self) -> Optional[str]:
        """
        Resolve the caller's address.

        Priority: CDN connecting-IP header, then the first entry of the
        forwarded-for list, then the raw connection address.
        """
        for candidate in (
            self.headers.get(CDN_IP_HEADER),
            self.headers.get(FORWARDED_FOR_HEADER),
            self.remote_addr,
        ):
            if candidate and candidate.strip():
                first = candidate.split(",")[0].strip()
                if first:
                    return first
        return None

    def audit_headers(self) -> Dict[str, str]:
        """Headers worth recording: only HTTP_-prefixed meta-variables."""
        return {
            name: value
            for name, value in self.headers.items()
            if name.startswith(HEADER_PREFIX)
        }

    def describe_body(self) -> Optional[str]:
        """
        Render the posted body for the audit log.

        A 'payload' form field is decoded as JSON when possible, otherwise it is
        logged as raw text.
        """
        if self.form:
            fields: Dict[str, Any] = dict(self.form)
            if PAYLOAD_FIELD in fields:
                try:
                    fields[PAYLOAD_FIELD] = json.loads(fields[PAYLOAD_FIELD])
                except (TypeError, ValueError):
                    pass
            return json.dumps(fields, indent=2, sort_keys=True, default=str)

        if self.body:
            return self.body.decode("utf-8", errors="replace")
        return None

    def __repr__(self) -> str:
        return f"RequestContext(origin={self.origin.value}, remote_addr={self.remote_addr})"
