"""Resolver chain stages."""

from customdns.resolvers.base import (
    ChainedResolver,
    ChainError,
    Resolver,
    chain,
    iter_chain,
    log_chain_configuration,
    resolver_name,
)
from customdns.resolvers.custom_dns import CustomDNSResolver
from customdns.resolvers.nxdomain import NxDomainResolver

__all__ = [
    "ChainError",
    "ChainedResolver",
    "CustomDNSResolver",
    "NxDomainResolver",
    "Resolver",
    "chain",
    "iter_chain",
    "log_chain_configuration",
    "resolver_name",
]
