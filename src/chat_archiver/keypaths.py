"""Enumerate the dotted key paths present in JSON-like data."""


def collect_key_paths(value, prefix: str = "", keys: set[str] | None = None) -> set[str]:
    """Add every dotted key path found under ``value`` to ``keys``.

    Lists are sampled through their first element only, on the assumption
    that the export's arrays are homogeneous.
    """
    if keys is None:
        keys = set()

    if isinstance(value, list):
        if value:
            collect_key_paths(value[0], prefix, keys)
        return keys

    if not isinstance(value, dict):
        return keys

    for key, child in value.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        keys.add(path)
        collect_key_paths(child, path, keys)

    return keys


def collect_record_key_paths(records: list) -> list[str]:
    """Sorted union of key paths across every record."""
    keys: set[str] = set()
    for record in records:
        collect_key_paths(record, "", keys)
    return sorted(keys)
