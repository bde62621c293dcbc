"""
Graphviz DOT rendering of concrete executions.

One node per enabled action, grouped in a cluster per thread, and one edge
per pair of every reported relation. Races are drawn as dashed, undirected
edges.
"""
import string
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..preexec.actions import RMW, Action, Fence, Load, Store
from .execution import Execution

_KIND_LABELS = {Load: "R", Store: "W", RMW: "RMW", Fence: "F"}

_EDGE_STYLES = {
    "sb": 'color=black',
    "asw": 'color=deeppink4, style=bold',
    "rf": 'color=red',
    "mo": 'color=blue',
    "sc": 'color=orange',
    "sw": 'color=deeppink4',
    "dr": 'color=darkorange, style=dashed, dir=none',
    "ur": 'color=purple, style=dashed, dir=none',
}


def node_letter(index: int) -> str:
    """a, b, ..., z, a1, b1, ..."""
    letter = string.ascii_lowercase[index % 26]
    suffix = index // 26
    return f"{letter}{suffix}" if suffix else letter


def action_label(action: Action) -> str:
    """``kind order addr=value`` for one concrete action."""
    head = f"{_KIND_LABELS[type(action)]} {action.memory_order}"
    if isinstance(action, Load):
        return f"{head} {action.address}={action.read_value}"
    if isinstance(action, Store):
        return f"{head} {action.address}={action.write_value}"
    if isinstance(action, RMW):
        return f"{head} {action.address}={action.read_value}->{action.write_value}"
    return head


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def generate_dot(execution: Execution, title: Optional[str] = None) -> str:
    """Render one execution as a DOT digraph.

    Args:
        execution: Concrete execution to draw
        title: Optional graph label

    Returns:
        DOT source text
    """
    letters: Dict[int, str] = {
        a.aid: node_letter(i) for i, a in enumerate(sorted(execution.actions, key=lambda a: a.aid))
    }

    lines: List[str] = ["digraph execution {"]
    lines.append("  node [shape=plaintext, fontname=\"Helvetica\"];")
    if title:
        lines.append(f"  label={_quote(title)};")

    for tid in execution.threads:
        lines.append(f"  subgraph cluster_thread_{tid} {{")
        lines.append(f"    label={_quote(f'thread {tid}')};")
        for a in execution.actions:
            if a.tid != tid:
                continue
            label = f"{letters[a.aid]}: {action_label(a)}"
            lines.append(f"    n{a.aid} [label={_quote(label)}];")
        lines.append("  }")

    relations = [
        ("sb", execution.sb),
        ("asw", execution.asw),
        ("rf", execution.rf),
        ("mo", execution.mo),
        ("sc", execution.sc),
        ("sw", execution.sw),
        ("dr", execution.data_races),
        ("ur", execution.unseq_races),
    ]
    for name, edges in relations:
        for src, dst in sorted(edges):
            if src not in letters or dst not in letters:
                continue
            lines.append(f"  n{src} -> n{dst} [label={name}, {_EDGE_STYLES[name]}];")

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(execution: Execution,
              out_file: Union[str, Path],
              title: Optional[str] = None) -> Path:
    """Write the DOT rendering of ``execution`` to ``out_file``.

    Returns:
        Path to the written file
    """
    path = Path(out_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_dot(execution, title=title))
    return path
