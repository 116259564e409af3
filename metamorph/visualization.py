"""
Visualization, reporting and artifact writing.
"""

import os

from .core.graph import RelationalNode, RelationalEdge
from .core.lattice import Sign
from .errors import IOFailure


def print_graph(adg):
    """Print a summary of the dependency graph."""
    print(f"\n{'='*60}")
    print(f"Output predicate: {adg.output_predicate}")
    print(f"Relations ({len(adg.predicate_ids)}):")
    for node in adg.relational_nodes():
        facts = len(adg.facts_of(node.tag))
        suffix = f"  [{facts} facts]" if facts else ""
        print(f"  {node.name}{suffix}")
    print(f"Fact nodes: {len(adg.fact_nodes())} | Edges: {adg.graph.number_of_edges()}")
    print(f"Ancestry: {len(adg.positive_ancestry_tags())} positive, "
          f"{len(adg.negative_ancestry_tags())} negative, "
          f"{len(adg.none_ancestry_tags())} none")
    print(f"{'='*60}")


def print_outcomes(sequence):
    """Print what every round of a transformation sequence did."""
    print(f"\n{'='*60}")
    print("Transformation history:")
    print(f"{'='*60}")
    for outcome in sequence.outcomes:
        print(f"  {outcome.name}")
    print(f"  {len(sequence.committed)} of {len(sequence.outcomes)} rounds committed")


def _escape(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def dot_source(adg) -> str:
    """The dependency graph as a Graphviz digraph: node list, then edge list."""
    lines = ["digraph adg {", "  rankdir=BT;", "  node [shape=box, style=rounded];"]
    for handle, data in adg.graph.nodes(data=True):
        node = data["node"]
        if isinstance(node, RelationalNode):
            style = ", style=\"rounded,filled\", fillcolor=lightblue" \
                if node.tag == adg.output_predicate else ""
            lines.append(f'  {handle} [label="{_escape(node.name)}"{style}];')
        else:
            lines.append(f'  {handle} [label="{_escape(node.name)}", shape=ellipse];')
    for source, target, data in adg.graph.edges(data=True):
        edge = data["edge"]
        attrs = f'label="{_escape(edge.name)}"'
        if isinstance(edge, RelationalEdge) and edge.sign is Sign.NEGATIVE:
            attrs += ", style=dashed"
        lines.append(f"  {source} -> {target} [{attrs}];")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _write(path, text):
    try:
        with open(path, "w") as f:
            f.write(text)
    except OSError as e:
        raise IOFailure(f"cannot write {path}: {e}") from e


def export_dot(adg, path="adg.dot", verbose=True):
    """Export the dependency graph as a DOT file for Graphviz visualization."""
    _write(path, dot_source(adg))
    if verbose:
        print(f"Graph exported to {path}")


def write_program(program, path, verbose=True):
    """Materialize a program to a rule file."""
    _write(path, program.materialize())
    if verbose:
        print(f"Program written to {path}")


def write_artifacts(folder, stem, program, adg, verbose=True):
    """Write <folder>/<stem>_adg.dot and <folder>/<stem>_program.rls."""
    try:
        os.makedirs(folder, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"cannot create folder {folder}: {e}") from e
    export_dot(adg, os.path.join(folder, f"{stem}_adg.dot"), verbose=verbose)
    write_program(program, os.path.join(folder, f"{stem}_program.rls"), verbose=verbose)
