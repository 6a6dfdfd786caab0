"""ufw status output parsing."""

import re

# "22", "22/tcp", "80,443/tcp", "22 (v6)"
_PORT_RE = re.compile(r"^(\d+(?:,\d+)*)(?:/(?:tcp|udp))?(?:\s+\(v6\))?$")


def parse_status(output: str) -> tuple[bool | None, list[str]]:
    """Return (active, rules) from `ufw status` output.

    active is None when the status line is missing.
    """
    active: bool | None = None
    rules: list[str] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        low = line.lower()
        if low.startswith("status:"):
            active = "inactive" not in low
            continue
        if low.startswith("to ") or low.startswith("--"):
            continue
        if "allow" not in low and "deny" not in low and "reject" not in low and "limit" not in low:
            continue
        # numbered output: "[ 1] 22  ALLOW IN  Anywhere"
        line = re.sub(r"^\[\s*\d+\]\s*", "", line)
        rules.append(" ".join(line.split()))
    return active, rules


def allowed_ports(rules: list[str]) -> list[int]:
    """Ports opened by ALLOW rules, sorted and de-duplicated (v4 and v6 collapse)."""
    ports: set[int] = set()
    for rule in rules:
        match = re.match(r"^(.+?)\s+ALLOW\b", rule, re.IGNORECASE)
        if not match:
            continue
        target = match.group(1).strip()
        port_match = _PORT_RE.match(target)
        if not port_match:
            continue
        ports.update(int(p) for p in port_match.group(1).split(","))
    return sorted(ports)
