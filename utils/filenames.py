import re


def export_filename(title: str, extension: str) -> str:
    """Default download name: every non-alphanumeric character of the title becomes an underscore."""
    stem = re.sub(r"[^a-zA-Z0-9]", "_", title or "")
    return f"{stem}_analysis.{extension}"
