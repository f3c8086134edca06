from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from dnslib import DNSQuestion, DNSRecord

from customdns.util import qtype_code


class ResponseType(enum.Enum):
    """Brief: Provenance of a terminal response produced by a chain stage."""

    CUSTOMDNS = "CUSTOMDNS"
    NOTFOUND = "NOTFOUND"


@dataclass
class Request:
    """
    Brief: A DNS query travelling down the resolver chain.

    Inputs:
      - req: Parsed dnslib DNSRecord holding the question.
      - log: Logger (or LoggerAdapter) used as the per-request logging context.
      - client_ip: Optional requestor address, used for diagnostics only.

    Outputs:
      - Request instance.

    Example:
        >>> r = Request.from_question("example.com", "A")
        >>> str(r.req.q.qname)
        'example.com.'
    """

    req: DNSRecord
    log: Union[logging.Logger, logging.LoggerAdapter] = field(
        default_factory=lambda: logging.getLogger("customdns")
    )
    client_ip: Optional[str] = None

    @classmethod
    def from_question(
        cls,
        qname: str,
        qtype: Union[int, str] = "A",
        *,
        log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        client_ip: Optional[str] = None,
    ) -> "Request":
        """
        Brief: Build a request carrying a single IN-class question.

        Inputs:
          - qname: Question name (trailing dot optional).
          - qtype: Query type as a mnemonic ("AAAA") or numeric code.
          - log: Optional logging context; defaults to the "customdns" logger.
          - client_ip: Optional requestor address.

        Outputs:
          - Request wrapping a freshly built DNSRecord.

        Raises:
          - ValueError: When qtype is not a known DNS type.
        """
        record = DNSRecord(q=DNSQuestion(qname, qtype_code(qtype)))
        if log is None:
            return cls(req=record, client_ip=client_ip)
        return cls(req=record, log=log, client_ip=client_ip)


@dataclass
class Response:
    """
    Brief: Terminal result of a chain stage.

    Inputs:
      - res: Reply DNSRecord (may carry zero answers for NOERROR/NODATA).
      - rtype: ResponseType describing which stage produced the reply.
      - reason: Short human-readable provenance marker (e.g. "CUSTOM DNS").
    """

    res: DNSRecord
    rtype: ResponseType
    reason: str = ""
