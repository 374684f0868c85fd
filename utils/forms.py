from flask import request


def form_text(*names, default=""):
    """First non-missing form field among ``names``, trimmed."""
    for name in names:
        value = request.form.get(name)
        if value is not None:
            return value.strip()
    return default


def query_text(name, default=""):
    value = (request.args.get(name) or "").strip()
    return value or default


def parse_int(value):
    """Integer value of a form field, or None when it is blank or not a number."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def sort_direction(name):
    value = query_text(name, "default")
    return value if value in ("asc", "desc") else "default"


def option_list(values, selected):
    return [{"value": value, "selected": value == selected} for value in values]
