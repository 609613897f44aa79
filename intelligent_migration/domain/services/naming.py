import re

_NON_ALNUM_RE = re.compile("[^a-z0-9]+")
_CAMEL_BOUNDARY_RE = re.compile("(?<=[a-z0-9])(?=[A-Z])")


def normalize_column_name(name: str) -> str:
    split = _CAMEL_BOUNDARY_RE.sub("_", str(name).strip())
    return _NON_ALNUM_RE.sub("_", split.lower()).strip("_")


def name_tokens(name: str) -> tuple[str, ...]:
    return tuple(token for token in normalize_column_name(name).split("_") if token)


def compact_name(name: str) -> str:
    return normalize_column_name(name).replace("_", "")


def contains_token_run(haystack: tuple[str, ...], needle: tuple[str, ...]) -> bool:
    if not needle or len(needle) > len(haystack):
        return False
    width = len(needle)
    return any(
        haystack[start : start + width] == needle
        for start in range(len(haystack) - width + 1)
    )
