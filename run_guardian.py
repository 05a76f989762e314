#!/usr/bin/env python3
"""
run_guardian.py - start Family Guardian from the project root.
Uses guardian_config.json when present, defaults otherwise.

  python run_guardian.py           # seed data files + start API server
  python run_guardian.py --init    # seed data files and guardian_config.json only
"""

import argparse
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Family Guardian - local server")
    parser.add_argument("--init", action="store_true", help="Create data files and a starter config, then exit")
    args = parser.parse_args()

    root = Path(__file__).parent
    sys.path.insert(0, str(root))

    from guardian.cli import main as cli_main

    command = ["init"] if args.init else ["serve"]
    sys.exit(cli_main(["--config-root", str(root), *command]))


if __name__ == "__main__":
    main()
