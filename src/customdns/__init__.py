"""customdns: a static domain -> address mapping stage for DNS resolver chains."""

__version__ = "0.1.0"
