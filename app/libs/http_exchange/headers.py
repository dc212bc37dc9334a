from collections.abc import Iterable, Mapping

HeaderValue = str | list[str]
Headers = Mapping[str, HeaderValue]


def get_header(headers: Headers | None, name: str) -> str | None:
    """Case-insensitive lookup; the first value wins for repeated headers."""
    if not headers:
        return None
    search = name.lower()
    for key, value in headers.items():
        if key.lower() == search:
            if isinstance(value, list):
                return value[0] if value else None
            return value
    return None


def has_header(headers: Headers | None, name: str) -> bool:
    return get_header(headers, name) is not None


def collect_headers(items: Iterable[tuple[str, str]]) -> dict[str, HeaderValue]:
    """Fold raw header pairs into a mapping keyed by lowercased name.

    Repeated headers become a list of values in arrival order.
    """
    collected: dict[str, HeaderValue] = {}
    for name, value in items:
        key = name.lower()
        if key not in collected:
            collected[key] = value
            continue
        existing = collected[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            collected[key] = [existing, value]
    return collected


def to_header_pairs(headers: Headers) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for name, value in headers.items():
        if isinstance(value, list):
            pairs.extend((name, str(item)) for item in value)
        else:
            pairs.append((name, str(value)))
    return pairs
