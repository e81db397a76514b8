"""Human-readable formatting helpers."""

UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 MiB``."""
    value = float(size)
    for unit in UNITS:
        if value < 1024 or unit == UNITS[-1]:
            break
        value /= 1024

    if unit == "B":
        return f"{size} B"
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"
