from __future__ import annotations

from typing import Iterator, List, TextIO

from dvsim.core.topology import AUTO_FILL_SENTINEL, DEFAULT_LINK_COST, Topology
from dvsim.core.types import DEFAULT_INFINITY


def _read_costs(topology: Topology, stdin: TextIO, stdout: TextIO, infinity: int) -> Iterator[int]:
    for link in topology.undefined_links():
        name = f"C({topology.label(link.src)},{topology.label(link.dst)})="
        while True:
            stdout.write(name)
            stdout.flush()
            line = stdin.readline()
            if not line:
                return
            try:
                value = int(line.strip())
            except ValueError:
                stdout.write(f"\nnot an integer: {line.strip()!r}\n")
                continue
            if value < 0 or value >= infinity:
                stdout.write(f"\ncost must be in [1, {infinity - 1}], or {AUTO_FILL_SENTINEL} to auto-fill\n")
                continue
            yield value
            break


def prompt_link_costs(
    topology: Topology,
    stdin: TextIO,
    stdout: TextIO,
    default_cost: int = DEFAULT_LINK_COST,
    infinity: int = DEFAULT_INFINITY,
) -> List[int]:
    """Ask for each undefined directed link cost in traversal order.

    Entering the auto-fill sentinel assigns ``default_cost`` to every link
    still undefined. Returns the values as entered, suitable for the
    ``topology.entered_costs`` config key.
    """
    stdout.write(
        f"Enter link costs. Type {AUTO_FILL_SENTINEL} to fill the rest with {default_cost}.\n"
    )
    entered: List[int] = []

    def _record() -> Iterator[int]:
        for value in _read_costs(topology, stdin, stdout, infinity):
            entered.append(value)
            yield value

    assigned = topology.fill_costs(_record(), default_cost=default_cost)
    stdout.write(f"\n{assigned} link costs defined.\n")
    return entered
