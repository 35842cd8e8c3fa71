"""Read the delegated name servers for an environment from its ``bbl`` state."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path

from ns_delegation.errors import StateEmpty, StateUnavailable
from ns_delegation.models import Action

logger = logging.getLogger(__name__)

_DNS_SERVERS_KEY = "cf_system_domain_dns_servers"


def read_nameservers(
    state_dir: str | Path,
    action: Action,
    bbl_binary: str = "bbl",
    _run=subprocess.run,
) -> tuple[str, ...]:
    """Extract the system-domain DNS servers from a bbl state directory.

    Runs ``bbl --state-dir <dir> lbs --json`` and reads the
    ``cf_system_domain_dns_servers`` list. Duplicates are dropped, first
    occurrence wins.

    Raises:
        StateUnavailable: the directory is missing or unreadable, or bbl failed.
        StateEmpty: ``action`` is add and no servers are listed.
    """
    path = Path(state_dir)
    if not path.is_dir():
        raise StateUnavailable(f"BBL state directory not found: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        raise StateUnavailable(f"BBL state directory is not readable: {path}")

    logger.info("Extracting DNS servers from BBL state...")
    cmd = [bbl_binary, "--state-dir", str(path), "lbs", "--json"]
    try:
        proc = _run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError:
        raise StateUnavailable(f"{bbl_binary} executable not found")
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise StateUnavailable(f"bbl lbs failed with exit code {exc.returncode}: {stderr}") from exc

    try:
        lbs = json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise StateUnavailable(f"bbl lbs returned invalid JSON: {exc.msg}") from exc

    raw = lbs.get(_DNS_SERVERS_KEY) if isinstance(lbs, dict) else None
    servers = tuple(dict.fromkeys(str(s).strip() for s in raw or [] if str(s).strip()))

    if not servers and action is Action.ADD:
        raise StateEmpty("No DNS servers found in BBL state")

    logger.info("Found %d DNS server(s): %s", len(servers), " ".join(servers))
    return servers
