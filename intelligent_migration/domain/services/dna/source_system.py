from collections.abc import Iterable

from ..naming import name_tokens, normalize_column_name

# Ordered: the first vendor whose marker appears in any column name wins.
SOURCE_SYSTEM_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("EPIC", ("epic", "mychart", "ser")),
    ("CERNER", ("cerner", "millennium", "prsnl")),
    ("MEDITECH", ("meditech", "mtweb", "mt")),
    ("ATHENAHEALTH", ("athenahealth", "athena", "ath")),
    ("ALLSCRIPTS", ("allscripts", "touchworks")),
)
# Markers at least this long may also appear inside a longer token.
EMBEDDED_MARKER_LENGTH = 5


def _has_marker(name: str, marker: str) -> bool:
    if marker in name_tokens(name):
        return True
    return len(marker) >= EMBEDDED_MARKER_LENGTH and marker in normalize_column_name(name)


def detect_source_system(column_names: Iterable[str]) -> str | None:
    """Guess the originating EHR vendor from column naming conventions."""
    names = [str(name) for name in column_names]
    for system, markers in SOURCE_SYSTEM_MARKERS:
        if any(_has_marker(name, marker) for name in names for marker in markers):
            return system
    return None
