from __future__ import annotations

import argparse
import logging
from typing import List

from .config.config_parser import AppConfig, ConfigError, parse_config_file
from .config.logging_config import init_logging
from .model import Request
from .resolvers import (
    CustomDNSResolver,
    NxDomainResolver,
    Resolver,
    chain,
    log_chain_configuration,
)


def build_chain(cfg: AppConfig) -> Resolver:
    """
    Brief: Assemble the resolver chain described by cfg.

    Inputs:
      - cfg: Validated AppConfig.

    Outputs:
      - Resolver: head of CustomDNSResolver -> NxDomainResolver.
    """
    return chain(CustomDNSResolver(cfg.custom_dns), NxDomainResolver())


def main(argv: List[str] | None = None) -> int:
    """
    Main entry point: load configuration, build the chain and answer one query.

    Args:
        argv: Command-line arguments.

    Returns:
        An exit code (0 on success, 1 on configuration or query errors).

    Example use:
        CLI:
            customdns --config config.yaml --query printer.lan --type A
    """
    parser = argparse.ArgumentParser(
        description="Answer DNS queries from a static custom mapping"
    )
    parser.add_argument("--config", default="config.yaml", help="Path to YAML config")
    parser.add_argument("--query", help="Domain or reverse name to resolve")
    parser.add_argument(
        "--type", dest="qtype", default="A", help="Query type (A, AAAA, PTR, ...)"
    )
    parser.add_argument(
        "--log-level", help="Override logging.level from the config file"
    )
    args = parser.parse_args(argv)

    try:
        cfg = parse_config_file(args.config)
    except (OSError, ConfigError) as exc:
        print(str(exc))
        return 1

    logging_cfg = dict(cfg.logging)
    if args.log_level:
        logging_cfg["level"] = args.log_level
    init_logging(logging_cfg)
    logger = logging.getLogger("customdns.main")
    logger.info("Loaded config from %s", args.config)

    head = build_chain(cfg)
    log_chain_configuration(head, logger)

    if not args.query:
        for line in head.configuration():
            print(line)
        return 0

    try:
        request = Request.from_question(args.query, args.qtype, log=logger)
    except ValueError as exc:
        print(str(exc))
        return 1

    response = head.resolve(request)
    print(response.res)
    print(f";; {response.rtype.value}: {response.reason}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
