"""Value computation for generated situations.

- terminal_equity.py: showdown/fold values against an opponent range
- resolving.py: CFR+ re-solving of a last-street node
- backends.py: the two interchangeable value backends and their factory
"""

from cfvgen.values.backends import (
    ValueBackend,
    TerminalEquityBackend,
    ResolvingBackend,
    create_value_backend
)

__all__ = [
    'ValueBackend',
    'TerminalEquityBackend',
    'ResolvingBackend',
    'create_value_backend',
]
