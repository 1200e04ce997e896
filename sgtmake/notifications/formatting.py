"""Currency and date formatting used in customer emails (Indian conventions)"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

RUPEE = '₹'


def group_indian(digits: str) -> str:
    """Group an unsigned integer string the Indian way: 12,34,567"""
    if len(digits) <= 3:
        return digits
    last_three = digits[-3:]
    rest = digits[:-3]
    groups = []
    while len(rest) > 2:
        groups.insert(0, rest[-2:])
        rest = rest[:-2]
    if rest:
        groups.insert(0, rest)
    return ','.join(groups + [last_three])


def _to_decimal(amount) -> Decimal:
    try:
        return Decimal(str(amount if amount is not None else 0))
    except (InvalidOperation, ValueError):
        return Decimal('0')


def format_amount(amount) -> str:
    """Format a number with Indian grouping, keeping only significant decimals"""
    value = _to_decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    integer_part, _, fraction = f"{abs(value):.2f}".partition('.')
    fraction = fraction.rstrip('0')
    grouped = group_indian(integer_part)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_inr(amount) -> str:
    """Format an amount as rupees with two decimals: ₹1,23,456.00"""
    value = _to_decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    integer_part, _, fraction = f"{abs(value):.2f}".partition('.')
    return f"{sign}{RUPEE}{group_indian(integer_part)}.{fraction}"


def format_long_date(value) -> str:
    """e.g. 5 March 2025"""
    if not value:
        return ''
    return f"{value.day} {value.strftime('%B %Y')}"
