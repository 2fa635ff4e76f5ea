import html


def escape_html(value: str) -> str:
    """Trim ``value`` and escape ``< > & " '`` as HTML entities."""
    return html.escape(value.strip(), quote=True)


def sanitize_task_input(
    title: str, description: str | None
) -> tuple[str, str | None]:
    return escape_html(title), escape_html(description) if description is not None else None
