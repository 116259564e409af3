"""
Give every rule a stable name.

Rule names end up on the graph's relational edges, so an edge can always
be traced back to the rule that produced it. Rule i of the statement list
is called r_<i>.
"""

from ..program.model import Rule


class NameRules:

    def __init__(self, verbose=True):
        self.verbose = verbose

    def apply(self, program):
        commit = program.fork(keep_all=False)
        for index, statement in enumerate(program.statements):
            if isinstance(statement, Rule):
                commit.add_rule(statement.renamed(f"r_{index}"))
            else:
                commit.keep(statement)
        if self.verbose:
            print("Renaming of rules complete")
        return commit.submit()
