import math
import html
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta

CURRENCY_SYMBOL = "₹"


def _group_indian(digits):
    """Group an integer digit string the Indian way: 12,34,56,789"""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount, decimals=2):
    """Format an amount as INR with Indian digit grouping, e.g. ₹12,34,567.00"""
    if amount is None:
        amount = 0

    # Exact binary value, halves rounded away from zero
    exact = Decimal(abs(float(amount)))
    text = str(exact.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP))
    whole, _, fraction = text.partition(".")
    formatted = f"{CURRENCY_SYMBOL}{_group_indian(whole)}"
    if fraction:
        formatted += f".{fraction}"

    is_zero = not any(ch not in "0." for ch in text)
    if float(amount) < 0 and not is_zero:
        return f"-{formatted}"
    return formatted


def whole_months(months):
    if months is None:
        return None
    return int(math.ceil(months))


def format_months(months):
    """Render a month count as years and months"""
    if months is None:
        return "Not reachable"

    total = whole_months(months)
    span = relativedelta(months=total)
    parts = []
    if span.years:
        parts.append(f"{span.years} year" + ("s" if span.years != 1 else ""))
    if span.months or not parts:
        parts.append(f"{span.months} month" + ("s" if span.months != 1 else ""))
    return " ".join(parts)


def target_date(months, start=None):
    """Approximate date the target is reached, counting whole months from start"""
    if months is None:
        return None
    start = start or date.today()
    return start + relativedelta(months=whole_months(months))


def result_card(title, rows, footnote=None):
    """Build the HTML results block shown under a calculator form"""
    lines = [f"<div class='result-card'><h3>{html.escape(title)}</h3>"]
    for row in rows:
        if row is None:
            lines.append("<hr class='result-divider'>")
            continue
        label, value = row
        lines.append(f"<p><strong>{html.escape(label)}:</strong> {html.escape(value)}</p>")
    if footnote:
        lines.append(f"<p class='result-footnote'><em>{html.escape(footnote)}</em></p>")
    lines.append("</div>")
    return "\n".join(lines)


def error_html(message):
    return f"<div class='status-error'>❌ Error: {html.escape(message, quote=False)}</div>"


def info_html(message):
    return f"<div class='status-info'>ℹ️ Info: {html.escape(message, quote=False)}</div>"
