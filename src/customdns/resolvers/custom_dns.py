from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from dnslib import QTYPE, RR

from customdns.config.config_parser import CustomDNSConfig
from customdns.config.logging_config import trace, with_prefix
from customdns.model import Request, Response, ResponseType
from customdns.resolvers.base import ChainedResolver, resolver_name
from customdns.util import (
    address_family,
    answer_to_string,
    create_answer_from_question,
    create_ptr_answer,
    extract_domain,
    reverse_name,
)

logger = logging.getLogger(__name__)

REASON = "CUSTOM DNS"


class CustomDNSResolver(ChainedResolver):
    """
    Brief: Answer A/AAAA/PTR queries from a static host -> addresses mapping.

    Forward lookups walk up the domain hierarchy, so a mapping for
    "example.com" also answers "foo.example.com"; the most specific configured
    name wins. A configured name queried for a type with no matching address
    gets NOERROR with an empty answer section rather than being delegated.
    Reverse lookups match the in-addr.arpa/ip6.arpa name of every configured
    address exactly. Everything else goes to the next resolver untouched.

    State is built once in __init__ and never modified afterwards, so resolve()
    needs no locking.

    Inputs:
      - config: CustomDNSConfig with mapping and custom_ttl.

    Outputs:
      - CustomDNSResolver instance.

    Example:
        >>> cfg = CustomDNSConfig(mapping={"example.com": ["1.2.3.4"]})
        >>> r = CustomDNSResolver(cfg)
        >>> r.configuration()
        ['example.com = "1.2.3.4"']
    """

    def __init__(self, config: Optional[CustomDNSConfig] = None) -> None:
        super().__init__()
        config = config or CustomDNSConfig()

        mapping: Dict[str, Tuple[str, ...]] = {}
        reverse: Dict[str, List[str]] = {}

        for host, addresses in config.mapping.items():
            domain = host.lower()
            mapping[domain] = tuple(addresses)

            for address in addresses:
                try:
                    ptr_name = reverse_name(address)
                except ValueError:
                    logger.debug(
                        "skipping reverse entry for %s: invalid address %r",
                        domain,
                        address,
                    )
                    continue
                owners = reverse.setdefault(ptr_name, [])
                if domain not in owners:
                    owners.append(domain)

        self._mapping: Mapping[str, Tuple[str, ...]] = MappingProxyType(mapping)
        self._reverse_addresses: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {name: tuple(owners) for name, owners in reverse.items()}
        )
        self._ttl = max(0, int(config.custom_ttl.total_seconds()))

    @property
    def mapping(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only view of lower-cased domain -> configured addresses."""
        return self._mapping

    @property
    def reverse_addresses(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only view of reverse name -> owning domains."""
        return self._reverse_addresses

    @property
    def ttl(self) -> int:
        return self._ttl

    def configuration(self) -> List[str]:
        if not self._mapping:
            return ["deactivated"]
        return [
            f'{domain} = "{", ".join(addresses)}"'
            for domain, addresses in self._mapping.items()
        ]

    def _response(self, request: Request, answers: List[RR]) -> Response:
        reply = request.req.reply()
        for rr in answers:
            reply.add_answer(rr)
        return Response(res=reply, rtype=ResponseType.CUSTOMDNS, reason=REASON)

    def _handle_reverse_dns(self, request: Request) -> Optional[Response]:
        question = request.req.q
        if question.qtype != QTYPE.PTR:
            return None

        owners = self._reverse_addresses.get(str(question.qname).lower())
        if not owners:
            return None

        answers = [create_ptr_answer(question, owner, self._ttl) for owner in owners]
        return self._response(request, answers)

    def _handle_forward_dns(self, request: Request, log) -> Optional[Response]:
        if not self._mapping:
            return None

        question = request.req.q
        domain = extract_domain(question)

        while domain:
            addresses = self._mapping.get(domain)
            if addresses is not None:
                answers = [
                    create_answer_from_question(question, address, self._ttl)
                    for address in addresses
                    if address_family(address) == question.qtype
                ]
                if answers:
                    log.debug(
                        "returning custom dns entry: domain=%s answer=%s",
                        domain,
                        answer_to_string(answers),
                    )
                # A known name without an address of the requested type is
                # answered with NOERROR and no records.
                return self._response(request, answers)

            _, dot, parent = domain.partition(".")
            if not dot:
                break
            domain = parent

        return None

    def resolve(self, request: Request) -> Response:
        log = with_prefix(request.log, "custom_dns_resolver")

        response = self._handle_reverse_dns(request)
        if response is not None:
            return response

        response = self._handle_forward_dns(request, log)
        if response is not None:
            return response

        trace(log, "go to next resolver: resolver=%s", resolver_name(self.next))
        return self.resolve_next(request)
