"""
exposure/cli.py
Command-line interface for Chat Exposure.

USAGE:
  exposure --input conversations.json
  exposure --input conversations.json --output analysis.json --envelope
  exposure --from-config
  python -m exposure.cli --input conversations.json --verbose

All processing is local — the export never leaves this machine.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from exposure.config import ensure_config
from exposure.parsers.export_parser import InvalidExportError, parse_export_file
from exposure.report import analyse_messages, result_to_dict
from exposure.report_export import export_to_json

logger = logging.getLogger(__name__)

# ANSI colors
GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'
BOLD   = '\033[1m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'exposure',
        description = 'Chat Exposure — what your AI chat history says about you',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
NOTE:
  Findings come from fixed keyword and pattern heuristics, not a
  language model. Expect misses and false positives.
        """
    )

    parser.add_argument(
        '--input', '-i',
        type = Path,
        help = 'Path to conversations.json from a ChatGPT data export',
    )
    parser.add_argument(
        '--output', '-o',
        type = Path,
        help = 'Write the result JSON here (default: config output_path)',
    )
    parser.add_argument(
        '--from-config',
        action = 'store_true',
        help   = 'Take input/output paths from exposure_config.json (auto-detects export)',
    )
    parser.add_argument(
        '--envelope',
        action = 'store_true',
        help   = 'Wrap the result with metadata and a SHA-256 content hash',
    )
    parser.add_argument(
        '--compact',
        action = 'store_true',
        help   = 'Write single-line JSON',
    )
    parser.add_argument(
        '--verbose', '-v',
        action = 'store_true',
        help   = 'Enable debug logging',
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    logging.basicConfig(
        level   = logging.DEBUG if args.verbose else logging.INFO,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    config = ensure_config() if args.from_config else {}
    input_path = args.input or (Path(config['export_path']) if config.get('export_path') else None)
    output_path = args.output or (Path(config['output_path']) if config.get('output_path') else None)
    envelope = args.envelope or bool(config.get('include_envelope'))
    indent = None if args.compact or config.get('pretty') is False else 2

    # ── VALIDATE INPUT ───────────────────────────────────────
    if input_path is None:
        _print(f"{RED}Error: no input. Pass --input or use --from-config.{RESET}")
        return 1
    if not input_path.is_file():
        _print(f"{RED}Error: File not found: {input_path}{RESET}")
        return 1

    _banner()
    _print(f"Export : {CYAN}{input_path}{RESET}")
    if output_path:
        _print(f"Output : {CYAN}{output_path}{RESET}")
    _print("")

    # ── PARSE ────────────────────────────────────────────────
    _step("Reading export...")
    t0 = time.time()
    try:
        messages = parse_export_file(input_path)
    except InvalidExportError as e:
        _print(f"{RED}Error: {e}{RESET}")
        return 1
    _ok(f"{len(messages)} messages extracted in {_elapsed(t0)}")

    # ── ANALYSE ──────────────────────────────────────────────
    _step("Analysing...")
    t0 = time.time()
    result = analyse_messages(messages)
    _ok(f"Analysis finished in {_elapsed(t0)}")

    # ── WRITE ────────────────────────────────────────────────
    if output_path:
        if envelope:
            text = export_to_json(result, source=input_path.name, indent=indent)
        else:
            text = json.dumps(result_to_dict(result), indent=indent, ensure_ascii=False)
        output_path.write_text(text, encoding='utf-8')
        _ok(f"Result written to {output_path}")

    _summary(result)
    return 0


# ── PRINT HELPERS ────────────────────────────────────────────

def _summary(result) -> None:
    info  = result.findings.personal_info
    stats = result.stats
    score = result.privacy_score
    color = RED if score >= 60 else YELLOW if score >= 30 else GREEN

    _print(f"\n{BOLD}Privacy score: {color}{score}/100{RESET}")
    _print(f"  Messages   : {stats.total_messages:,} ({stats.user_messages:,} yours)")
    _print(f"  Time span  : {stats.time_span}")
    _print(f"  Avg length : {stats.avg_message_length} chars")

    if info.names:
        _print(f"\n  People:")
        for n in info.names[:5]:
            rel = f" ({n.relationship})" if n.relationship else ''
            _print(f"    • {n.name}{rel} — {n.mentions} mentions")
    if info.locations:
        _print(f"\n  Places:")
        for loc in info.locations[:5]:
            _print(f"    • {loc.location} [{loc.type}] — {loc.mentions}")

    _print(f"\n  Sensitive topics : {len(result.findings.sensitive_topics)}")
    _print(f"  Juicy moments    : {len(result.juiciest_moments)}")
    _print(f"  Emails / phones  : {len(info.emails)} / {len(info.phone_numbers)}\n")


def _banner():
    _print(f"""
{BOLD}{CYAN}
  CHAT EXPOSURE
  What your AI chat history gives away
{RESET}""")

def _step(msg):  _print(f"  {CYAN}→{RESET} {msg}")
def _ok(msg):    _print(f"  {GREEN}✓{RESET} {msg}")
def _print(msg): print(msg)

def _elapsed(t0: float) -> str:
    s = time.time() - t0
    return f"{s:.1f}s" if s < 60 else f"{int(s//60)}m {int(s%60)}s"


if __name__ == '__main__':
    sys.exit(main())
