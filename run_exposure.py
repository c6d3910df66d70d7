#!/usr/bin/env python3
"""
run_exposure.py — Config-driven Chat Exposure runner
Uses exposure_config.json. Run from project root.

  python run_exposure.py           # analyse export_path → output_path
  python run_exposure.py --api     # start API server

Config is created manually or via POST /config. Auto-detects
conversations.json if export_path is not set.
"""

import argparse
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Chat Exposure — automated runner")
    parser.add_argument("--api", action="store_true", help="Start API server")
    args = parser.parse_args()

    root = Path(__file__).parent
    sys.path.insert(0, str(root))

    from exposure.config import ensure_config

    config = ensure_config(root)

    if args.api:
        from exposure.api import serve
        serve(host=config["api_host"], port=int(config["api_port"]), project_root=root)
        return

    export_path = config.get("export_path")
    if not export_path or not Path(export_path).exists():
        print("No export found. Set export_path in exposure_config.json", file=sys.stderr)
        sys.exit(1)

    output_path = Path(config.get("output_path") or "analysis.json")
    if not output_path.is_absolute():
        output_path = root / output_path

    from exposure.cli import main as cli_main
    argv = ["--input", str(export_path), "--output", str(output_path)]
    if config.get("include_envelope"):
        argv.append("--envelope")
    if config.get("pretty") is False:
        argv.append("--compact")
    sys.exit(cli_main(argv))


if __name__ == "__main__":
    main()
