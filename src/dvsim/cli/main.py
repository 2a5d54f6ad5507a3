from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from dvsim.backends.emu import EmuBackend
from dvsim.cli.prompt import prompt_link_costs
from dvsim.cli.render import StepPrinter
from dvsim.cli.run_emu import load_effective_config, run_emu
from dvsim.cli.validate import validate_config
from dvsim.core.topology import DEFAULT_LINK_COST, ConfigError, Topology
from dvsim.core.types import DEFAULT_INFINITY


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dvsim", description="Distance-vector routing simulator")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Run a simulation and print the JSON result")
    p_run.add_argument("--config", required=True)

    p_show = sub.add_parser("show", help="Run a simulation printing every step's tables")
    p_show.add_argument("--config", required=True)
    p_show.add_argument(
        "--prompt-costs",
        action="store_true",
        help="Read undefined link costs from stdin before running.",
    )

    p_validate = sub.add_parser("validate", help="Validate a config file")
    p_validate.add_argument("--config", required=True)

    return parser


def _show(config_path: str, prompt_costs: bool) -> int:
    cfg = load_effective_config(config_path)
    engine_cfg = dict(cfg.get("engine", {}))
    infinity = int(engine_cfg.get("infinity", DEFAULT_INFINITY))
    topo_cfg = dict(cfg.get("topology", {}))

    if prompt_costs:
        try:
            draft = Topology.from_config(topo_cfg, infinity=infinity, validate=False)
        except ConfigError as exc:
            print(json.dumps({"ok": False, "errors": [str(exc)]}, ensure_ascii=False, indent=2))
            return 1
        entered = prompt_link_costs(
            draft,
            sys.stdin,
            sys.stdout,
            default_cost=int(topo_cfg.get("default_cost", DEFAULT_LINK_COST)),
            infinity=infinity,
        )
        topo_cfg["entered_costs"] = list(topo_cfg.get("entered_costs", [])) + entered
        cfg["topology"] = topo_cfg

    errors = validate_config(cfg)
    if errors:
        print(json.dumps({"ok": False, "errors": errors}, ensure_ascii=False, indent=2))
        return 1

    backend = EmuBackend()
    topology = Topology.from_config(topo_cfg, infinity=infinity)
    printer = StepPrinter(topology, infinity, sys.stdout)
    result = backend.run(cfg, observers=[printer])

    if result["converged_step"] is None:
        print(f"No convergence after {result['elapsed_steps']} steps.")
        return 1
    print(
        f"Converged at step {result['converged_step']}; "
        f"tables stable since step {result['stable_step']}; "
        f"{result['dropped_packets']} packets dropped."
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "run":
        try:
            result = run_emu(args.config)
        except ConfigError as exc:
            print(json.dumps({"ok": False, "errors": [str(exc)]}, ensure_ascii=False, indent=2))
            return 1
        print(json.dumps(result, indent=2, ensure_ascii=False, sort_keys=True))
        return 0

    if args.cmd == "show":
        return _show(args.config, args.prompt_costs)

    if args.cmd == "validate":
        cfg = load_effective_config(args.config)
        errors = validate_config(cfg)
        if errors:
            print(json.dumps({"ok": False, "errors": errors}, ensure_ascii=False, indent=2))
            return 1
        print(json.dumps({"ok": True}, ensure_ascii=False, indent=2))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
