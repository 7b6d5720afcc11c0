"""Inspect subcommand implementation."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Literal, get_args

from ..exceptions import TracegraphLoadError
from ..models import Trace, split_trace
from ..renderers import render_trace
from ..serializers import load_trace_json

VerbosityArg = Literal["minimal", "standard", "full"]


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("inspect", help="Summarize a trace JSON file and print its tree")
    parser.add_argument("trace_file", type=Path, help="Path to trace JSON file")
    parser.add_argument("--verbosity", choices=get_args(VerbosityArg), default="standard", help="Tree detail level")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON instead of text")
    parser.add_argument("--output", type=Path, default=None, help="Write the --json summary to this file")
    parser.set_defaults(handler=handle)


def handle(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.output is not None and not args.json:
        parser.error("--output is only supported when --json is provided")
    return run_inspect(args.trace_file, args.verbosity, as_json=args.json, output_path=args.output)


def run_inspect(
    trace_file: Path,
    verbosity: VerbosityArg,
    *,
    as_json: bool,
    output_path: Path | None,
) -> int:
    try:
        trace = load_trace_json(trace_file)
    except FileNotFoundError:
        print(f"Error: file not found: {trace_file}", file=sys.stderr)
        return 1
    except TracegraphLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error reading file: {exc}", file=sys.stderr)
        return 1
    summary = build_summary(trace)

    if as_json:
        payload = json.dumps(summary, ensure_ascii=True, sort_keys=True)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload + "\n", encoding="utf-8")
        else:
            print(payload)
        return 0

    duration = summary["total_duration_ms"]
    print(f"File: {trace_file}")
    print(f"Nodes: {summary['node_count']}")
    print(f"Edges: {summary['edge_count']}")
    print(f"Abstract nodes: {summary['abstract_count']}")
    print(f"Failed nodes: {summary['failed_count']}")
    print(f"Root nodes: {summary['root_count']}")
    print(f"Total duration: {duration:.0f}ms")
    print()
    print(render_trace(trace, verbosity=verbosity))
    return 0


def build_summary(trace: Trace) -> dict[str, object]:
    nodes, edges = split_trace(list(trace))
    node_ids = {node.data.id for node in nodes}
    roots = [node for node in nodes if node.data.parent not in node_ids]
    return {
        "node_count": len(nodes),
        "edge_count": len(edges),
        "abstract_count": sum(1 for node in nodes if node.data.abstract),
        "failed_count": sum(1 for node in nodes if node.data.errors),
        "parallel_count": sum(1 for node in nodes if node.data.parallel),
        "root_count": len(roots),
        "total_duration_ms": sum(node.data.duration or 0.0 for node in roots),
    }
