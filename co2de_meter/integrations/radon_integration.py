"""
Radon integration for cyclomatic complexity of Python sources.
Informational only; it does not feed the complexity factor.
"""

from typing import Optional

from radon.visitors import ComplexityVisitor


def get_max_cyclomatic_complexity(source_code: str) -> Optional[int]:
    """Return the maximum cyclomatic complexity of any single block, None on parse error."""
    try:
        visitor = ComplexityVisitor.from_code(source_code)
    except SyntaxError:
        return None
    if not visitor.blocks:
        return 0
    return max(b.complexity for b in visitor.blocks)
