"""Options controlling what the enumeration loop reports."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os


_FALSE_STRINGS = ("0", "false", "no", "off")


@dataclass
class EnumerationOptions:
    """Reporting options for :func:`extract_executions`.

    Attributes:
        graph_dir: Directory receiving one DOT file per execution (cwd if None)
        graph_prefix: File name prefix, files are ``<prefix>_<i>.dot``
        write_graphs: Whether DOT files are written at all
        echo_summary: Whether the summary is printed to stdout
    """

    graph_dir: Optional[Path] = None
    graph_prefix: str = "graph"
    write_graphs: bool = True
    echo_summary: bool = True

    def resolved_graph_dir(self) -> Path:
        return Path(self.graph_dir) if self.graph_dir is not None else Path.cwd()

    @classmethod
    def from_env(cls, **overrides) -> "EnumerationOptions":
        """Defaults, overridden by the environment, overridden by ``overrides``.

        $MEMMODEL_GRAPH_DIR sets the graph directory and $MEMMODEL_WRITE_GRAPHS
        set to 0/false/no/off disables graph output.
        """
        opts = cls()
        env_dir = os.environ.get("MEMMODEL_GRAPH_DIR")
        if env_dir:
            opts.graph_dir = Path(env_dir)
        env_write = os.environ.get("MEMMODEL_WRITE_GRAPHS")
        if env_write is not None:
            opts.write_graphs = env_write.strip().lower() not in _FALSE_STRINGS
        for key, value in overrides.items():
            setattr(opts, key, value)
        return opts
