from datetime import date, datetime
from decimal import Decimal
from typing import Any

# Au-delà, un entier perd sa précision côté navigateur (Number.MAX_SAFE_INTEGER)
MAX_SAFE_INTEGER = 2 ** 53 - 1


def sanitize_response(obj: Any) -> Any:
    """Convertit récursivement les valeurs non sérialisables sans perte (grands entiers, Decimal, bytes)"""
    if obj is None or isinstance(obj, (bool, float, str)):
        return obj

    if isinstance(obj, int):
        return str(obj) if abs(obj) > MAX_SAFE_INTEGER else obj

    if isinstance(obj, Decimal):
        return format(obj, "f")

    if isinstance(obj, (bytes, bytearray)):
        return "0x" + bytes(obj).hex()

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, (list, tuple, set)):
        return [sanitize_response(item) for item in obj]

    if isinstance(obj, dict):
        return {str(key): sanitize_response(value) for key, value in obj.items()}

    return obj


def to_decimal_string(value: Any) -> str:
    """Représentation décimale d'un solde, quel que soit son type d'origine"""
    if value is None:
        return "0"
    if isinstance(value, bool):
        raise TypeError("a balance cannot be a boolean")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value).strip()


def parse_balance(value: Any) -> Decimal:
    """Valeur numérique d'un solde; une valeur illisible compte comme zéro"""
    try:
        amount = Decimal(to_decimal_string(value))
    except (ArithmeticError, TypeError, ValueError):
        return Decimal(0)
    return Decimal(0) if amount.is_nan() else amount
