from __future__ import annotations

import logging
import re
from typing import ClassVar, Iterator, List, Optional, Union

from customdns.model import Request, Response

logger = logging.getLogger(__name__)

_CAMEL_1 = re.compile(r"(.)([A-Z][a-z]+)")
_CAMEL_2 = re.compile(r"([a-z0-9])([A-Z])")


class ChainError(RuntimeError):
    """Raised when a resolver chain is assembled or walked incorrectly."""


class Resolver:
    """Brief: Base class for every stage of a resolver chain.

    Subclasses implement resolve() and may override configuration() to
    describe their active state for diagnostics.

    Inputs:
      - None

    Outputs:
      - Resolver instance.

    Example use:
        >>> class Fixed(Resolver):
        ...     def resolve(self, request):
        ...         return self.response
        >>> resolver_name(Fixed())
        'fixed'
    """

    # Optional explicit diagnostics name; defaults to the snake_case class name.
    name: ClassVar[Optional[str]] = None

    def resolve(self, request: Request) -> Response:
        """Brief: Answer request or raise.

        Inputs:
          - request: Request carrying the question and logging context.

        Outputs:
          - Response for the request.
        """
        raise NotImplementedError

    def configuration(self) -> List[str]:
        """Brief: Human-readable lines describing the resolver's active state."""
        return []


class ChainedResolver(Resolver):
    """Brief: Resolver that hands queries it does not answer to a successor.

    Inputs:
      - None (the successor is attached with set_next() or chain()).

    Outputs:
      - ChainedResolver instance with no successor.
    """

    def __init__(self) -> None:
        self.next: Optional[Resolver] = None

    def get_next(self) -> Optional[Resolver]:
        return self.next

    def set_next(self, resolver: Resolver) -> None:
        self.next = resolver

    def resolve_next(self, request: Request) -> Response:
        """Brief: Delegate request, unchanged, to the successor.

        Inputs:
          - request: The original request.

        Outputs:
          - Whatever the successor returns; its exceptions propagate as-is.

        Raises:
          - ChainError: When no successor is attached.
        """
        if self.next is None:
            raise ChainError(f"{resolver_name(self)} has no next resolver")
        return self.next.resolve(request)


def resolver_name(resolver: Union[Resolver, None]) -> str:
    """Brief: Return the diagnostics name of a resolver.

    Inputs:
      - resolver: Resolver instance (or None).

    Outputs:
      - str: The class-level ``name`` when set, otherwise the snake_case class
        name without a trailing "Resolver" (e.g. CustomDNSResolver ->
        "custom_dns"); "none" for None.
    """
    if resolver is None:
        return "none"
    explicit = getattr(resolver, "name", None)
    if explicit:
        return str(explicit)
    cls_name = type(resolver).__name__
    if cls_name.endswith("Resolver") and cls_name != "Resolver":
        cls_name = cls_name[: -len("Resolver")]
    s1 = _CAMEL_1.sub(r"\1_\2", cls_name)
    return _CAMEL_2.sub(r"\1_\2", s1).lower()


def chain(*resolvers: Resolver) -> Resolver:
    """Brief: Link resolvers in order and return the head of the chain.

    Inputs:
      - *resolvers: Resolvers from first to last. All but the last must be
        ChainedResolver instances.

    Outputs:
      - Resolver: The first resolver.

    Raises:
      - ChainError: When called without resolvers or when a non-chained
        resolver is not last.

    Example:
        >>> from customdns.resolvers import CustomDNSResolver, NxDomainResolver
        >>> head = chain(CustomDNSResolver(), NxDomainResolver())
        >>> [resolver_name(r) for r in iter_chain(head)]
        ['custom_dns', 'nx_domain']
    """
    if not resolvers:
        raise ChainError("cannot build an empty resolver chain")

    for current, successor in zip(resolvers, resolvers[1:]):
        if not isinstance(current, ChainedResolver):
            raise ChainError(
                f"{resolver_name(current)} cannot delegate to {resolver_name(successor)}"
            )
        current.set_next(successor)

    return resolvers[0]


def iter_chain(head: Resolver) -> Iterator[Resolver]:
    """Brief: Yield resolvers from head following next links."""
    current: Optional[Resolver] = head
    seen = set()
    while current is not None:
        if id(current) in seen:
            raise ChainError(f"resolver chain loops back to {resolver_name(current)}")
        seen.add(id(current))
        yield current
        current = current.get_next() if isinstance(current, ChainedResolver) else None


def log_chain_configuration(
    head: Resolver, log: Union[logging.Logger, logging.LoggerAdapter, None] = None
) -> None:
    """Brief: Log every resolver's configuration lines at INFO level."""
    log = log or logger
    for resolver in iter_chain(head):
        name = resolver_name(resolver)
        log.info("-> %s", name)
        for line in resolver.configuration():
            log.info("     %s", line)
