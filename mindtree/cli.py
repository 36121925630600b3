"""Command line entry point for mindtree.

Usage:
  mindtree layout [--measurer chars|cairo] [--collapse ID ...] [--settings JSON]
  mindtree check
"""

from __future__ import annotations

import argparse
import logging
import sys

from mindtree import __version__
from mindtree.layout import compute_layout
from mindtree.measure import CharWidthMeasurer
from mindtree.model import sample_tree, validate_tree
from mindtree.preflight import run_preflight_or_die
from mindtree.settings import LayoutSettings
from mindtree.store import toggle_collapse


def _make_measurer(name: str):
    if name == "cairo":
        run_preflight_or_die(require_cairo=True)
        from mindtree.cairo_measure import CairoTextMeasurer

        return CairoTextMeasurer()
    return CharWidthMeasurer()


def _load_settings(raw: str | None) -> LayoutSettings:
    if raw:
        return LayoutSettings.from_json(raw)
    return LayoutSettings.from_env()


def _cmd_layout(args: argparse.Namespace) -> int:
    tree = sample_tree()
    for node_id in args.collapse or []:
        result = toggle_collapse(tree, node_id)
        if not result.changed:
            sys.stderr.write(f"Unknown node: {node_id}\n")
            return 2
        tree = result.tree

    layout = compute_layout(tree, _make_measurer(args.measurer), settings=_load_settings(args.settings))
    print(f"{'id':<12} {'depth':>5} {'x':>8} {'y':>8} {'w':>6} {'h':>6}  text")
    for node in layout.visible_nodes():
        print(
            f"{node.id:<12} {node.depth:>5} {node.x:>8.1f} {node.y:>8.1f} "
            f"{node.width:>6.1f} {node.height:>6.1f}  {'  ' * node.depth}{node.text}"
        )
    hidden = len(layout) - len(layout.visible_nodes())
    if hidden:
        print(f"({hidden} hidden under collapsed nodes)")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    problems = validate_tree(sample_tree())
    for problem in problems:
        print(problem)
    if problems:
        return 1
    print("Sample map OK")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mindtree")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_lay = sub.add_parser("layout", help="Lay out the sample map and print node positions")
    p_lay.add_argument("--measurer", choices=["chars", "cairo"], default="chars")
    p_lay.add_argument("--collapse", action="append", metavar="ID", help="Collapse a node before layout")
    p_lay.add_argument("--settings", help="Layout settings as JSON (default: $MINDTREE_LAYOUT)")
    p_lay.set_defaults(func=_cmd_layout)

    p_chk = sub.add_parser("check", help="Validate the sample map's invariants")
    p_chk.set_defaults(func=_cmd_check)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
