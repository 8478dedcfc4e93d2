from datetime import date, datetime, timedelta

# ISO first; invoices printed in Brazil use day/month/year
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


def parse_date_text(value: str):
    value_text = value.strip()
    if not value_text:
        return None
    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(value_text, date_format).date()
        except ValueError:
            continue
    return None


def normalize_date(value):
    """Calendar day for a date, datetime or date string; ``None`` if unreadable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date_text(value)
    return None


def window_start(today, days):
    """First calendar day still inside a trailing window of ``days`` days."""
    return today - timedelta(days=days)
