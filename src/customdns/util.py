from __future__ import annotations

import ipaddress
from typing import Iterable, Optional, Union

from dnslib import AAAA, PTR, QTYPE, RR, A, DNSQuestion


def qtype_name(qtype: Union[int, str]) -> str:
    """Brief: Normalize a DNS qtype value to its uppercase mnemonic.

    Inputs:
      - qtype: DNS RR type as an integer code (e.g. 1) or mnemonic string
        (e.g. "A", "aaaa").

    Outputs:
      - str: Uppercase qtype name when resolvable, or the stringified value
        when the code is unknown.
    """
    if isinstance(qtype, int):
        return str(QTYPE.get(qtype, str(qtype))).upper()
    return str(qtype).strip().upper()


def qtype_code(qtype: Union[int, str]) -> int:
    """Brief: Convert a qtype mnemonic or code into its numeric code.

    Inputs:
      - qtype: "A", "aaaa", "PTR", 28, or a numeric string such as "65".

    Outputs:
      - int: Numeric qtype code.

    Raises:
      - ValueError: When the mnemonic is unknown.

    Example:
        >>> qtype_code("aaaa")
        28
    """
    if isinstance(qtype, int):
        return qtype
    text = str(qtype).strip().upper()
    if text.isdigit():
        return int(text)
    code = QTYPE.reverse.get(text)
    if code is None:
        raise ValueError(f"unknown DNS query type {qtype!r}")
    return int(code)


def fqdn(name: object) -> str:
    """Brief: Return name with exactly one trailing dot."""
    return str(name).rstrip(".") + "."


def extract_domain(question: DNSQuestion) -> str:
    """Brief: Extract the plain, lower-cased domain of a question.

    Inputs:
      - question: dnslib DNSQuestion.

    Outputs:
      - str: Domain without the trailing root dot (e.g. "foo.example.com").
    """
    return str(question.qname).rstrip(".").lower()


def _parse(address: str) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    ip = ipaddress.ip_address(str(address).strip())
    # Zone indices ("fe80::1%eth0") have no DNS representation.
    if getattr(ip, "scope_id", None):
        raise ValueError(f"scoped address {address!r} cannot be published in DNS")
    # IPv4-mapped IPv6 addresses behave as their IPv4 form.
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def reverse_name(address: str) -> str:
    """Brief: Compute the fully qualified reverse-lookup name of an address.

    Inputs:
      - address: IPv4 or IPv6 address string.

    Outputs:
      - str: e.g. "4.3.2.1.in-addr.arpa." or the nibble ip6.arpa form.

    Raises:
      - ValueError: When address is not a valid IP address.

    Example:
        >>> reverse_name("1.2.3.4")
        '4.3.2.1.in-addr.arpa.'
    """
    return fqdn(_parse(address).reverse_pointer)


def address_family(address: str) -> Optional[int]:
    """Brief: Map an address to the qtype it can answer.

    Inputs:
      - address: Address string from configuration.

    Outputs:
      - QTYPE.A for IPv4 (including IPv4-mapped IPv6), QTYPE.AAAA for other
        IPv6 addresses, or None when the address cannot be parsed.
    """
    try:
        ip = _parse(address)
    except ValueError:
        return None
    return QTYPE.A if ip.version == 4 else QTYPE.AAAA


def create_answer_from_question(question: DNSQuestion, address: str, ttl: int) -> RR:
    """Brief: Build an A or AAAA answer for question pointing at address.

    Inputs:
      - question: The original question; its name, type and class are reused.
      - address: IP address string matching the question type.
      - ttl: Record TTL in seconds.

    Outputs:
      - dnslib RR.

    Raises:
      - ValueError: For question types other than A/AAAA or a malformed address.
    """
    ip = _parse(address)
    if question.qtype == QTYPE.A:
        rdata = A(str(ip))
    elif question.qtype == QTYPE.AAAA:
        rdata = AAAA(str(ip))
    else:
        raise ValueError(
            f"unsupported query type {qtype_name(question.qtype)} for address answer"
        )
    return RR(
        rname=question.qname,
        rtype=question.qtype,
        rclass=question.qclass,
        ttl=ttl,
        rdata=rdata,
    )


def create_ptr_answer(question: DNSQuestion, target: str, ttl: int) -> RR:
    """Brief: Build a PTR answer for question pointing at target."""
    return RR(
        rname=question.qname,
        rtype=QTYPE.PTR,
        rclass=question.qclass,
        ttl=ttl,
        rdata=PTR(fqdn(target)),
    )


def answer_to_string(answers: Iterable[RR]) -> str:
    """Brief: Summarize answer records for log lines.

    Example:
        A (1.2.3.4), AAAA (2001:db8::1)
    """
    parts = []
    for rr in answers:
        parts.append(f"{qtype_name(rr.rtype)} ({str(rr.rdata).rstrip('.')})")
    return ", ".join(parts)
