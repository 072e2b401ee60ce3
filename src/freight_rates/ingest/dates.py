"""Date normalization for spreadsheet exports (DD/MM/YYYY, as exported in Brazil)."""


def normalize_date(raw: str) -> str:
    """
    Convert "D/M/YYYY" to "YYYY-MM-DD"; anything without "/" is returned as is.

    No calendar validation is done: "32/13/2024" becomes "2024-13-32".
    """
    if not raw or '/' not in raw:
        return raw
    parts = raw.split('/')
    day = parts[0]
    month = parts[1]
    year = parts[2] if len(parts) > 2 else ''
    return f"{year}-{month.rjust(2, '0')}-{day.rjust(2, '0')}"
