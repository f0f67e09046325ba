"""Parsing of submitted form values into model-ready Python values."""
from datetime import datetime

from .errors import ValidationFailure


def clean_str(form, name):
    value = (form.get(name) or "").strip()
    return value or None


def parse_int(form, name, required=False):
    raw = (form.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationFailure(f"{name} is required", field=name)
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationFailure(f"{name} must be a whole number", field=name)


def parse_date(form, name, required=False):
    raw = (form.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationFailure(f"{name} is required", field=name)
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationFailure(f"{name} must be a date (YYYY-MM-DD)", field=name)


def parse_id_list(form, name):
    ids = []
    for raw in form.getlist(name):
        try:
            ids.append(int(raw))
        except (TypeError, ValueError):
            raise ValidationFailure(f"{name} must contain numeric ids", field=name)
    return ids


def submitted(form, parsers):
    """Parse only the fields present in ``form``; ``parsers`` maps name -> parser."""
    return {name: parse(form, name) for name, parse in parsers.items() if name in form}
