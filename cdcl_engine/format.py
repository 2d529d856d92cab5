"""
Text formatting for literals, clauses, answers and search traces.
"""

from typing import Dict, Iterable, List, Optional

from .solver import Answer, EventKind, SearchEvent


def fmt_lit(lit: int) -> str:
    """Format literal: -5 -> '-x5', 5 -> '+x5'"""
    sign = '+' if lit > 0 else '-'
    return f"{sign}x{abs(lit)}"


def fmt_clause(clause: Iterable[int]) -> str:
    """Format clause: (1, -2, 3) -> '( +x1 -x2 +x3 )', () -> '( )'"""
    lits = ' '.join(fmt_lit(lit) for lit in clause)
    return f"( {lits} )" if lits else "( )"


def fmt_assignments(assignments: Dict[int, bool]) -> str:
    """Format assignments: {1: True, 2: False} -> 'x1=True , x2=False'"""
    if not assignments:
        return ''
    parts = [f"x{var}={value}" for var, value in sorted(assignments.items())]
    return ' , '.join(parts)


def fmt_model(assignment: Dict[int, bool], width: int = 10) -> List[str]:
    """
    Format a model as DIMACS-style value lines.

    {1: True, 2: False} -> ['v 1 -2 0']. Long models are split into lines of
    `width` literals; the terminating 0 is on the last line.
    """
    lits = [str(var if value else -var) for var, value in sorted(assignment.items())]
    lits.append('0')
    return [
        'v ' + ' '.join(lits[i:i + width]) for i in range(0, len(lits), width)
    ]


def fmt_answer(answer: Answer, model: bool = False) -> str:
    """Render a verdict, optionally followed by the model lines for SAT."""
    lines = [str(answer)]
    if model and answer.is_sat:
        lines.extend(fmt_model(answer.assignment))
    return '\n'.join(lines)


def fmt_event(event: SearchEvent) -> str:
    """
    Format a search event on one line.

    DECIDE    @1 -x1
    PROPAGATE @1 +x2 BECAUSE ( +x1 +x2 )
    CONFLICT  @1 ( +x1 -x2 )
    LEARN     @1 ( +x1 ) UIP +x1
    BACKJUMP  @0
    """
    head = f"{event.kind.name:<9} @{event.level}"

    if event.kind == EventKind.DECIDE:
        return f"{head} {fmt_lit(event.literal)}"
    if event.kind == EventKind.PROPAGATE:
        return f"{head} {fmt_lit(event.literal)} BECAUSE {fmt_clause(event.clause)}"
    if event.kind == EventKind.CONFLICT:
        return f"{head} {fmt_clause(event.clause)}"
    if event.kind == EventKind.LEARN:
        return f"{head} {fmt_clause(event.clause)} UIP {fmt_uip(event.literal)}"
    return head


def fmt_uip(lit: Optional[int]) -> str:
    return fmt_lit(lit) if lit is not None else '-'


def fmt_trace(events: Iterable[SearchEvent]) -> str:
    return '\n'.join(fmt_event(event) for event in events)
