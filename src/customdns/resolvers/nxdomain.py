from __future__ import annotations

from dnslib import RCODE

from customdns.model import Request, Response, ResponseType
from customdns.resolvers.base import Resolver


class NxDomainResolver(Resolver):
    """
    Brief: Terminal chain stage answering NXDOMAIN for every query.

    Inputs:
      - None

    Outputs:
      - NxDomainResolver instance; resolve() returns a reply with the
        original question, no records and rcode NXDOMAIN.
    """

    def resolve(self, request: Request) -> Response:
        reply = request.req.reply()
        reply.header.rcode = RCODE.NXDOMAIN
        return Response(res=reply, rtype=ResponseType.NOTFOUND, reason="NXDOMAIN")
