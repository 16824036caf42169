def format_number(value) -> str:
    """Render 8.0 as "8" and 7.5 as "7.5", the way the dashboard shows scores."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_currency(amount) -> str:
    return f"${int(amount):,}"
