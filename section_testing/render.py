"""Render a finished traversal as a combination list or a Mermaid flowchart."""
from __future__ import annotations

import itertools
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from section_testing.types import SectionPath, TraversalResult


def format_combinations(result: TraversalResult) -> str:
    """One line per run, e.g. ``push, reverse``."""
    lines = []
    for names in result.combinations():
        lines.append(", ".join(names) if names else "(no sections)")
    return "\n".join(lines)


def _make_id(counter: itertools.count, name: str) -> str:
    clean = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    clean = re.sub(r"_+", "_", clean).strip("_")
    return f"n{next(counter)}_{clean}"


def generate_mermaid(result: TraversalResult) -> str:
    counter = itertools.count(1)
    root = _make_id(counter, result.name)
    ids: dict[SectionPath, str] = {(): root}

    entered: set[SectionPath] = set()
    for run in result.runs:
        for depth in range(1, len(run.entered) + 1):
            entered.add(run.entered[:depth])

    nodes = [f'    {root}(("{result.name.replace(chr(34), chr(39))}"))']
    edges: list[str] = []
    for path in result.discovered:
        sid = _make_id(counter, path[-1].name)
        ids[path] = sid
        label = path[-1].name.replace('"', "'")
        if path in entered:
            nodes.append(f'    {sid}["{label}"]')
        else:
            # Discovered but never entered
            nodes.append(f'    {sid}[/"{label}"/]')
        parent = ids.get(path[:-1])
        if parent:
            edges.append(f"    {parent} --> {sid}")

    lines = ["graph TD"]
    lines.extend(nodes)
    lines.extend(edges)
    return "\n".join(lines)
