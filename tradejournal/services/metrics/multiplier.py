"""Contract point values for the futures symbols the journal knows about."""

# Micro contracts match anywhere in the symbol (e.g. "MESZ4"), so they are
# checked before the exact full-size roots.
_CONTAINS_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("MES", 5),
    ("MNQ", 2),
)

_EXACT_MULTIPLIERS: dict[str, float] = {
    "ES": 50,
    "NQ": 20,
}


def resolve_multiplier(symbol: str) -> float:
    """Dollar value of a one-point move for one unit of `symbol`. Unknown symbols are 1."""
    s = symbol.upper()
    for root, multiplier in _CONTAINS_MULTIPLIERS:
        if root in s:
            return multiplier
    return _EXACT_MULTIPLIERS.get(s, 1)
