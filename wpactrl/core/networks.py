"""Parsing of LIST_NETWORKS replies."""

from __future__ import annotations

from wpactrl.core.errors import NetworkParseError
from wpactrl.core.model import Network


def parse_network_list(reply: str) -> list[Network]:
    """Parse a LIST_NETWORKS reply into networks, in daemon order.

    The first line is a header ("network id / ssid / bssid / flags"); every
    following line is tab separated, starting with the id and the ssid.
    """
    rows = reply.split("\n")[1:]
    networks: list[Network] = []
    for lineno, row in enumerate(rows, start=2):
        fields = row.split("\t")
        if len(fields) < 2:
            raise NetworkParseError(f"Malformed LIST_NETWORKS line {lineno}: {row!r}")
        networks.append(Network(id=fields[0], ssid=fields[1]))
    return networks
