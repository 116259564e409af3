"""
Ancestry and inverse-stratum propagation.

Starting at the output relation (inverse stratum 0, ancestry POSITIVE),
walk the dependency graph backwards, from head relations to the body
relations they depend on:

    positive edge   predecessor gets (s,     a)
    negative edge   predecessor gets (s + 1, inverse(a))

A node whose stratum goes up passes the new stratum on to its
predecessors; a node that already has an equal or higher stratum stops
the walk, unless the incoming signal changed its ancestry (POSITIVE
meeting NEGATIVE), in which case the signal still travels on so every
predecessor sees every parity that reaches it.

This is a worklist, not recursion: graphs of real programs are deep
enough to hit the interpreter's recursion limit. The stack is LIFO so
nodes are visited in depth-first order.

Strata are bounded by the number of relations in a stratifiable program.
Going past that bound means a cycle through a negative edge, which the
walk would otherwise follow forever.
"""

from ..errors import GraphInvariantViolation
from .graph import RelationalNode, FactEdge
from .lattice import Ancestry, Sign


def _predecessor_signals(adg, handle, stratum, ancestry) -> list:
    signals = []
    for source, edge in adg.incoming_edges(handle):
        if isinstance(edge, FactEdge):
            continue
        if edge.sign is Sign.NEGATIVE:
            signals.append((source, stratum + 1, ancestry.inverse()))
        else:
            signals.append((source, stratum, ancestry))
    return signals


def propagate(adg, verbose: bool = True):
    """
    Compute inverse stratum and ancestry for every relation.

    Previous results are cleared first, so calling this twice on an
    unchanged graph gives identical assignments.

    Raises GraphInvariantViolation if no output predicate is set, if the
    walk reaches a fact node, or if the graph is not stratifiable.
    """
    if adg.output_predicate is None:
        raise GraphInvariantViolation("No output predicate set")

    if verbose:
        print(f"Beginning inverse stratum and ancestry computation "
              f"starting at node {adg.output_predicate}")

    for node in adg.relational_nodes():
        node.reset()

    limit = len(adg.predicate_ids)
    worklist = [(adg.handle_for(adg.output_predicate), 0, Ancestry.POSITIVE)]
    visits = 0

    while worklist:
        handle, stratum, ancestry = worklist.pop()
        visits += 1
        node = adg.node_at(handle)
        if not isinstance(node, RelationalNode):
            raise GraphInvariantViolation(
                f"Attempted to set ancestry and inverse stratum for fact node {node.name}"
            )

        before = node.ancestry
        node.merge(ancestry)

        if node.inverse_stratum is None or node.inverse_stratum < stratum:
            if stratum > limit:
                raise GraphInvariantViolation(
                    f"Inverse stratum of {node.tag} exceeds {limit}: "
                    f"negation cycle, program is not stratifiable"
                )
            node.inverse_stratum = stratum
        elif node.ancestry is not before:
            stratum = node.inverse_stratum
        else:
            continue

        signals = _predecessor_signals(adg, handle, stratum, ancestry)
        worklist.extend(reversed(signals))

    if verbose:
        print(f"Ancestry and inverse stratum computation complete ({visits} visits).")
