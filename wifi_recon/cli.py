"""Command-line interface and interactive console for wifi-recon."""

import argparse
import logging
import os
import re
import sys
from typing import Callable, List, NamedTuple, Optional

from .constants import _BANNER, _MISSED_AFTER
from .errors import ReconError

logger = logging.getLogger(__name__)

_MAC_PATTERN = r"((?:[0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2})"


class Command(NamedTuple):
    name: str
    pattern: "re.Pattern"
    description: str
    handler: Callable[[List[str]], None]


def _command(name: str, regex: str, description: str, handler) -> Command:
    return Command(name, re.compile(r"^" + regex + r"$"), description, handler)


class Console:
    """Maps textual commands onto WiFiRecon operations."""

    def __init__(self, recon, out: Callable[[str], None] = print):
        self.recon = recon
        self.out = out
        self.commands = self._build_commands()

    def _build_commands(self) -> List[Command]:
        r = self.recon
        return [
            _command("wifi.recon on", r"wifi\.recon on",
                     "Start 802.11 wireless base stations discovery.",
                     lambda args: r.start()),
            _command("wifi.recon off", r"wifi\.recon off",
                     "Stop 802.11 wireless base stations discovery.",
                     lambda args: r.stop()),
            _command("wifi.deauth", r"wifi\.deauth",
                     "Start a 802.11 deauth attack against the selected targets.",
                     self._deauth),
            _command("wifi.recon set client MAC",
                     r"wifi\.recon set client " + _MAC_PATTERN,
                     "Set client to deauth (single target).",
                     lambda args: r.set_client(args[0])),
            _command("wifi.recon clear client", r"wifi\.recon clear client",
                     "Remove client to deauth.",
                     lambda args: r.clear_client()),
            _command("wifi.recon set bs MAC",
                     r"wifi\.recon set bs " + _MAC_PATTERN,
                     "Set 802.11 base station address to filter for.",
                     lambda args: r.set_access_point(args[0])),
            _command("wifi.recon clear bs", r"wifi\.recon clear bs",
                     "Remove the 802.11 base station filter.",
                     lambda args: r.clear_access_point()),
            _command("wifi.show", r"wifi\.show(?: (essid|seen))?",
                     "Show current hosts list (sort by essid, default, or seen).",
                     lambda args: r.show(args[0] or "essid")),
            _command("wifi.alias MAC NAME",
                     r"wifi\.alias " + _MAC_PATTERN + r" (.+)",
                     "Assign an alias to a known station.",
                     self._alias),
            _command("wifi.json", r"wifi\.json",
                     "Print the station registry as JSON.",
                     lambda args: self.out(r.to_json())),
            _command("help", r"help", "List available commands.",
                     lambda args: self._help()),
        ]

    def _deauth(self, args):
        sent = self.recon.start_deauth()
        self.out(f"[*] {sent} deauth frames sent")

    def _alias(self, args):
        if self.recon.wifi is None:
            raise ReconError("WiFi is not yet initialized.")
        mac, alias = args
        if not self.recon.wifi.set_alias_for(mac, alias.strip()):
            raise ReconError(f"Could not find endpoint {mac}")

    def _help(self):
        width = max(len(c.name) for c in self.commands)
        for c in self.commands:
            self.out(f"  {c.name:<{width}}  {c.description}")
        self.out(f"  {'quit':<{width}}  Exit.")

    def dispatch(self, line: str) -> bool:
        """Run one command line; returns False when the console should exit."""
        line = " ".join(line.strip().split())
        if not line:
            return True
        if line in ("quit", "exit", "q"):
            return False

        for cmd in self.commands:
            m = cmd.pattern.match(line)
            if m is None:
                continue
            try:
                cmd.handler(list(m.groups()))
            except (ReconError, ValueError) as e:
                self.out(f"[!] {e}")
            return True

        self.out(f"[!] Unknown command: {line}  (try 'help')")
        return True


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _check_root():
    """Warn if not running as root (monitor mode requires CAP_NET_ADMIN)."""
    if os.geteuid() != 0:
        print("[!] Warning: wifi-recon requires root (or CAP_NET_RAW + CAP_NET_ADMIN)")
        print("    Run with: sudo wifi-recon  OR  sudo python -m wifi_recon")
        print()


def _auto_detect_interface() -> Optional[str]:
    """Return the first available wireless interface."""
    from .capture import find_wireless_interfaces
    ifaces = find_wireless_interfaces()
    return ifaces[0] if ifaces else None


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wifi-recon",
        description=(
            "802.11 reconnaissance console: access point and client discovery\n"
            "in monitor mode, traffic accounting and deauthentication."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    iface = p.add_argument_group("Interface")
    iface.add_argument(
        "-i", "--interface", metavar="IFACE",
        help="Wireless interface to use (default: auto-detect). "
             "Monitor mode is configured automatically.",
    )

    reg = p.add_argument_group("Registry")
    reg.add_argument("--alias-file", metavar="FILE",
                     help="JSON file aliases are loaded from and saved to; "
                          "changing the base station filter empties the live "
                          "alias table but keeps the file")
    reg.add_argument("--missed-after", type=float, default=_MISSED_AFTER,
                     metavar="SEC",
                     help=f"Seconds without frames before a station counts as "
                          f"missed (default: {_MISSED_AFTER:.0f})")
    reg.add_argument("--just-joined", type=float, metavar="SEC",
                     help="Highlight stations first seen within SEC seconds")
    reg.add_argument("--alive", type=float, metavar="SEC",
                     help="Highlight stations seen within SEC seconds")
    reg.add_argument("--present", type=float, metavar="SEC",
                     help="Dim stations not seen for more than SEC seconds")

    status = p.add_argument_group("Status server")
    status.add_argument("--status", action="store_true",
                        help="Serve the registry snapshot over HTTP/SocketIO")
    status.add_argument("--status-port", type=int, default=8081, metavar="PORT",
                        help="Status server port (default: 8081)")

    misc = p.add_argument_group("Misc")
    misc.add_argument("-e", "--eval", metavar="CMDS",
                      help="Semicolon-separated commands to run before the prompt")
    vq = misc.add_mutually_exclusive_group()
    vq.add_argument("-v", "--verbose", action="store_true",
                    help="Debug logging")
    vq.add_argument("-q", "--quiet", action="store_true",
                    help="Warnings and errors only")
    misc.add_argument("--config", metavar="FILE",
                      help="Path to configuration file (TOML or JSON)")

    return p


def _setup_logging(args):
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _repl(console: Console):
    while True:
        try:
            line = input("wifi-recon > ")
        except EOFError:
            print()
            return
        if not console.dispatch(line):
            return


def main(argv: Optional[List[str]] = None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    from .config import load_config, merge_with_cli, thresholds_from
    cfg = load_config(args.config)
    if cfg:
        merge_with_cli(args, cfg)

    _setup_logging(args)
    _check_root()

    if args.interface is None:
        args.interface = _auto_detect_interface()
        if args.interface is None:
            print("Error: No wireless interface found.")
            print("  Specify one with:  -i <interface>")
            sys.exit(1)
        print(f"[*] Using interface: {args.interface}")

    from .aliases import AliasStore
    from .recon import WiFiRecon

    listeners = {"new": [], "lost": []}

    def _on_new(endpoint):
        label = endpoint.hostname or endpoint.vendor
        print(f"\n[wifi.endpoint.new] {endpoint.hw_address} {label} ch {endpoint.channel}")
        for cb in listeners["new"]:
            cb(endpoint)

    def _on_lost(endpoint):
        print(f"\n[wifi.endpoint.lost] {endpoint.hw_address} {endpoint.hostname}")
        for cb in listeners["lost"]:
            cb(endpoint)

    recon = WiFiRecon(
        interface=args.interface,
        aliases=AliasStore(args.alias_file),
        on_new=_on_new,
        on_lost=_on_lost,
        missed_after=args.missed_after,
        thresholds=thresholds_from(args),
    )

    server = None
    if args.status:
        from .status_server import StatusServer
        server = StatusServer(recon, port=args.status_port)
        listeners["new"].append(server.emit_new)
        listeners["lost"].append(server.emit_lost)
        server.start()

    print(_BANNER)
    console = Console(recon)
    try:
        if args.eval:
            for line in args.eval.split(";"):
                if not console.dispatch(line):
                    return
        _repl(console)
    except KeyboardInterrupt:
        print()
    except PermissionError:
        print("\nError: Permission denied — run with sudo")
        sys.exit(1)
    finally:
        if recon.running:
            recon.stop(wait=True)
        if server is not None:
            server.stop()
