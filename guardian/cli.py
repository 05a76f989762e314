"""
guardian/cli.py
Command-line interface for Family Guardian.

USAGE:
  guardian init
  guardian serve [--host 127.0.0.1] [--port 3000]
  guardian check "URGENT: verify your account now" [--source manual_check]
  guardian emergency
  guardian alerts [--limit 20]
  guardian approve ALERT_ID
  guardian block ALERT_ID
  guardian contacts [--blocked]
  guardian stats

Global options (before the command):
  --config-root DIR   where guardian_config.json lives (default: cwd)
  --data-dir DIR      override the config's data_dir
  --verbose, -v       debug logging
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from guardian.api import build_coordinator
from guardian.config import CONFIG_FILENAME, load_config, resolve_data_dir, save_config
from guardian.coordinator import AlertCoordinator
from guardian.display import format_alert, format_blocked_contact, format_safe_contact
from guardian.errors import StorageUnavailable
from guardian.models.record import ACTION_APPROVE, ACTION_BLOCK, EventOutcome

logger = logging.getLogger(__name__)

GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'
BOLD   = '\033[1m'


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'guardian',
        description = 'Family Guardian - scam screening and family alert relay',
    )
    parser.add_argument('--config-root', type=Path, default=None,
                        help='Directory containing guardian_config.json (default: cwd)')
    parser.add_argument('--data-dir', type=Path, default=None,
                        help='Directory for alerts / contacts JSON files')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('init', help='Create data files and a starter guardian_config.json')

    serve = sub.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', default=None, help='Host to bind (default: from config)')
    serve.add_argument('--port', type=int, default=None, help='Port to bind (default: from config)')

    check = sub.add_parser('check', help='Screen a message for scam indicators')
    check.add_argument('message', help='Message text to check')
    check.add_argument('--source', default='manual_check', help='Origin label (default: manual_check)')
    check.add_argument('--type', default='message', dest='event_type',
                       help='Event type: message / call (default: message)')

    sub.add_parser('emergency', help='Send an emergency alert to the family')

    alerts = sub.add_parser('alerts', help='List latest alerts')
    alerts.add_argument('--limit', type=int, default=None, help='Max alerts (default: from config)')

    for name, help_text in ((ACTION_APPROVE, 'Approve an alert'), (ACTION_BLOCK, 'Block an alert')):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('alert_id', type=int, help='Alert id')

    contacts = sub.add_parser('contacts', help='List safe contacts')
    contacts.add_argument('--blocked', action='store_true', help='List blocked contacts instead')

    sub.add_parser('stats', help='Dashboard counters')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    logging.basicConfig(
        level   = logging.DEBUG if args.verbose else logging.WARNING,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    config   = load_config(args.config_root)
    data_dir = args.data_dir or resolve_data_dir(config, args.config_root)

    if args.command == 'serve':
        return _serve(args, config, data_dir)

    guardian = build_coordinator(data_dir=data_dir, config=config)
    try:
        guardian.initialize()
        return _dispatch(args, guardian, config, data_dir)
    except StorageUnavailable as e:
        _print(f"{RED}Error: {e}{RESET}")
        return 1


def _dispatch(args, guardian: AlertCoordinator, config, data_dir: Path) -> int:
    cmd = args.command

    if cmd == 'init':
        _ok(f"Data files ready in {CYAN}{data_dir}{RESET}")
        config_root = args.config_root or Path.cwd()
        if not (config_root / CONFIG_FILENAME).exists():
            _ok(f"Wrote {CYAN}{save_config(config, config_root)}{RESET}")
        return 0

    if cmd == 'check':
        return _report_event(guardian.handle_event(args.message, args.source, args.event_type))

    if cmd == 'emergency':
        return _report_event(guardian.emergency())

    if cmd == 'alerts':
        alerts = guardian.list_alerts(args.limit or config.get('alert_list_limit', 20))
        if not alerts:
            _print('No alerts at this time. Everything looks good!')
        for alert in alerts:
            _print(format_alert(alert))
        return 0

    if cmd in (ACTION_APPROVE, ACTION_BLOCK):
        outcome = guardian.handle_action(args.alert_id, cmd)
        if not outcome.ok:
            _print(f"{RED}Error: {outcome.detail} ({args.alert_id}){RESET}")
            return 1
        _ok(f"Alert {outcome.alert_id} resolved ({outcome.action})")
        if outcome.blocked_phone:
            _ok(f"Blocked {outcome.blocked_phone}")
        return 0

    if cmd == 'contacts':
        if args.blocked:
            for c in guardian.list_blocked_contacts():
                _print(format_blocked_contact(c))
        else:
            for c in guardian.list_safe_contacts():
                _print(format_safe_contact(c))
        return 0

    if cmd == 'stats':
        stats = guardian.stats()
        _print(f"  Pending alerts   : {stats.pending_alerts}")
        _print(f"  Emergency alerts : {stats.emergency_alerts}")
        _print(f"  Safe contacts    : {stats.safe_contacts_count}")
        return 0

    raise ValueError(f"Unknown command: {cmd}")


def _report_event(outcome: EventOutcome) -> int:
    if outcome.status == 'invalid':
        _print(f"{YELLOW}{outcome.caution}{RESET}")
        return 1
    if outcome.alert_created and outcome.alert_type == 'emergency':
        _print(f"{BOLD}{RED}{outcome.caution}{RESET}")
    elif outcome.alert_created:
        _print(f"{RED}⚠ {outcome.caution}{RESET}")
    else:
        _print(f"{GREEN}✓ {outcome.caution}{RESET}")
    return 0


def _serve(args, config, data_dir: Path) -> int:
    import uvicorn

    from guardian.api import build_app

    host = args.host or config['host']
    port = args.port or config['port']
    _print(f"Family Guardian API → {CYAN}http://{host}:{port}{RESET}")
    _print(f"Data directory      → {CYAN}{data_dir}{RESET}")
    uvicorn.run(build_app(data_dir=data_dir, config=config), host=host, port=port, log_level='info')
    return 0


# ── PRINT HELPERS ────────────────────────────────────────────

def _ok(msg):    _print(f"  {GREEN}✓{RESET} {msg}")
def _print(msg): print(msg)


if __name__ == '__main__':
    sys.exit(main())
