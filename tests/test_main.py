"""
Brief: Tests for the customdns.main CLI entrypoint.

Inputs:
  - None

Outputs:
  - None
"""

import logging

from dnslib import QTYPE

from customdns import main as main_mod
from customdns.config.config_parser import load_config
from customdns.model import Request, ResponseType
from customdns.resolvers import CustomDNSResolver, NxDomainResolver, iter_chain

CONFIG = (
    "logging:\n"
    "  level: warn\n"
    "  stderr: false\n"
    "customDNS:\n"
    "  customTTL: 5m\n"
    "  mapping:\n"
    "    printer.lan: 192.168.178.3, 2001:db8::3\n"
)


def _write_config(tmp_path, text=CONFIG):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_build_chain_orders_stages():
    """
    Brief: build_chain puts the custom mapping before the NXDOMAIN stage.

    Inputs:
      - AppConfig with one mapping

    Outputs:
      - None: Asserts stage types and TTL
    """
    cfg = load_config({"customDNS": {"mapping": {"a.lan": "10.0.0.1"}, "customTTL": 60}})
    stages = list(iter_chain(main_mod.build_chain(cfg)))

    assert [type(s) for s in stages] == [CustomDNSResolver, NxDomainResolver]
    assert stages[0].ttl == 60


def test_main_resolves_query(tmp_path, capsys):
    """
    Brief: --query prints the reply and its provenance.

    Inputs:
      - config file with printer.lan

    Outputs:
      - None: Asserts exit code and printed answer
    """
    rc = main_mod.main(
        ["--config", _write_config(tmp_path), "--query", "printer.lan", "--type", "AAAA"]
    )
    out = capsys.readouterr().out

    assert rc == 0
    assert "2001:db8::3" in out
    assert "192.168.178.3" not in out
    assert ";; CUSTOMDNS: CUSTOM DNS" in out


def test_main_unknown_name_reaches_nxdomain(tmp_path, capsys):
    """
    Brief: Unmapped names are answered by the terminal stage.

    Inputs:
      - query for scanner.lan

    Outputs:
      - None: Asserts NXDOMAIN provenance
    """
    rc = main_mod.main(["--config", _write_config(tmp_path), "--query", "scanner.lan"])
    out = capsys.readouterr().out

    assert rc == 0
    assert "NXDOMAIN" in out
    assert ";; NOTFOUND: NXDOMAIN" in out


def test_main_without_query_prints_configuration(tmp_path, capsys):
    """
    Brief: Without --query the active mapping is printed.

    Inputs:
      - config file with printer.lan

    Outputs:
      - None: Asserts configuration line
    """
    rc = main_mod.main(["--config", _write_config(tmp_path)])
    out = capsys.readouterr().out

    assert rc == 0
    assert 'printer.lan = "192.168.178.3, 2001:db8::3"' in out


def test_main_reports_config_errors(tmp_path, capsys):
    """
    Brief: Invalid or missing config files exit with status 1.

    Inputs:
      - bad TTL config and missing path

    Outputs:
      - None: Asserts return codes and message
    """
    bad = _write_config(tmp_path, "customDNS:\n  customTTL: never\n")
    assert main_mod.main(["--config", bad]) == 1
    assert "invalid configuration" in capsys.readouterr().out

    assert main_mod.main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_main_rejects_unknown_query_type(tmp_path, capsys):
    """
    Brief: An unknown --type exits with status 1.

    Inputs:
      - --type BOGUS

    Outputs:
      - None: Asserts return code and message
    """
    rc = main_mod.main(
        ["--config", _write_config(tmp_path), "--query", "printer.lan", "--type", "BOGUS"]
    )
    assert rc == 1
    assert "unknown DNS query type" in capsys.readouterr().out


def test_main_log_level_override(tmp_path, capsys):
    """
    Brief: --log-level overrides the configured level.

    Inputs:
      - --log-level debug

    Outputs:
      - None: Asserts root level
    """
    main_mod.main(["--config", _write_config(tmp_path), "--log-level", "debug"])
    assert logging.getLogger().level == logging.DEBUG


def test_request_from_question_defaults():
    """
    Brief: Request.from_question builds an IN-class question with a default logger.

    Inputs:
      - name and numeric qtype

    Outputs:
      - None: Asserts question fields and logger
    """
    req = Request.from_question("host.lan", QTYPE.PTR, client_ip="192.0.2.1")
    assert str(req.req.q.qname) == "host.lan."
    assert req.req.q.qtype == QTYPE.PTR
    assert req.req.q.qclass == 1
    assert req.log.name == "customdns"
    assert req.client_ip == "192.0.2.1"
    assert ResponseType.CUSTOMDNS.value == "CUSTOMDNS"
