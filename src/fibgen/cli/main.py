from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import yaml

from fibgen.core.forwarding import write_forwarding_table
from fibgen.errors import PreconditionError
from fibgen.model.addresses import load_address_table
from fibgen.model.topology import load_topology
from fibgen.runtime.config import (
    ADDRESS_MODES,
    IP_FORMATS,
    ForwardingConfig,
    GeneratorConfig,
    load_run_config,
)
from fibgen.topology.generators import generate_from_config, write_generated


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fibgen",
        description="Generate synthetic topologies and static forwarding tables.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Write a topology file and an address file")
    p_gen.add_argument("--type", default="fullmesh", choices=["fullmesh", "mesh2d", "grid"])
    p_gen.add_argument("--nodes", type=int, default=4, help="Node count for fullmesh.")
    p_gen.add_argument("--rows", type=int, default=2, help="Row count for mesh2d.")
    p_gen.add_argument("--cols", type=int, default=2, help="Column count for mesh2d.")
    p_gen.add_argument("--topology-out", required=True)
    p_gen.add_argument("--address-out", required=True)

    p_fwd = sub.add_parser("forwarding", help="Derive a forwarding table from topology + addresses")
    p_fwd.add_argument("--topology", required=True, help="Topology file (src iface dst iface).")
    p_fwd.add_argument("--addresses", required=True, help="Address file (node,iface,ip).")
    p_fwd.add_argument("--out", required=True, help="Forwarding table output path.")
    p_fwd.add_argument("--ip-format", default="dotted", choices=list(IP_FORMATS))
    p_fwd.add_argument("--metric-scale", type=int, default=8)
    p_fwd.add_argument("--address-mode", default="peer", choices=list(ADDRESS_MODES))

    p_run = sub.add_parser("run", help="Generate and derive tables from a YAML config")
    p_run.add_argument("--config", required=True)
    p_run.add_argument(
        "--metric-scale",
        type=int,
        default=None,
        help="Override forwarding.metric_scale.",
    )
    p_run.add_argument(
        "--address-mode",
        default=None,
        choices=list(ADDRESS_MODES),
        help="Override forwarding.address_mode.",
    )
    p_run.add_argument(
        "--ip-format",
        default=None,
        choices=list(IP_FORMATS),
        help="Override ip_format of every configured output.",
    )

    return parser


def cmd_generate(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = GeneratorConfig(type=args.type, n_nodes=args.nodes, rows=args.rows, cols=args.cols)
    generated = generate_from_config(cfg)
    written = write_generated(generated, args.topology_out, args.address_out)
    return {
        "ok": True,
        "written": written,
        "links": len(generated.links),
        "addresses": len(generated.addresses),
        "topology_file": str(args.topology_out),
        "address_file": str(args.address_out),
    }


def cmd_forwarding(args: argparse.Namespace) -> Dict[str, Any]:
    config = ForwardingConfig(
        metric_scale=args.metric_scale,
        address_mode=args.address_mode,
        ip_format=args.ip_format,
    )
    topology = load_topology(args.topology)
    addresses = load_address_table(args.addresses)
    summary = write_forwarding_table(args.out, topology, addresses, config)
    return {"ok": True, "outputs": [summary.as_dict()]}


def cmd_run(args: argparse.Namespace) -> Dict[str, Any]:
    run_cfg = load_run_config(args.config)
    forwarding = run_cfg.forwarding
    if args.metric_scale is not None:
        forwarding = replace(forwarding, metric_scale=args.metric_scale)
    if args.address_mode is not None:
        forwarding = replace(forwarding, address_mode=args.address_mode)
    result: Dict[str, Any] = {"ok": True}

    if run_cfg.generator is not None:
        generated = generate_from_config(run_cfg.generator)
        if not write_generated(generated, run_cfg.topology_file, run_cfg.address_file):
            raise PreconditionError(
                f"generator {run_cfg.generator.type!r} produced no links; "
                "refusing to derive tables from existing input files"
            )
        result["generated"] = True

    topology = load_topology(run_cfg.topology_file)
    addresses = load_address_table(run_cfg.address_file)
    outputs: List[Dict[str, Any]] = []
    for output in run_cfg.outputs:
        config = forwarding.with_ip_format(args.ip_format or output.ip_format)
        summary = write_forwarding_table(output.path, topology, addresses, config)
        outputs.append(summary.as_dict())
    result["outputs"] = outputs
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "generate": cmd_generate,
        "forwarding": cmd_forwarding,
        "run": cmd_run,
    }
    try:
        result = handlers[args.cmd](args)
    except (PreconditionError, ValueError, OSError, yaml.YAMLError) as exc:
        logging.getLogger("fibgen.cli").error("%s failed: %s", args.cmd, exc)
        print(json.dumps({"ok": False, "error": str(exc)}, ensure_ascii=False, indent=2))
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
