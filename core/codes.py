# core/codes.py
import secrets
import string
import time

ALPH = string.ascii_uppercase + string.digits
DIGITS36 = string.digits + string.ascii_uppercase


def to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(DIGITS36[r])
    return "".join(reversed(out))


def generate_code(prefix: str, n: int = 4) -> str:
    """
    Human readable, roughly time ordered code.
    Format: <PREFIX>-<epoch ms base36>-<n random chars>, e.g. TRIP-LZ8K1A2B-Q7XZ
    """
    stamp = to_base36(int(time.time() * 1000))
    tail = "".join(secrets.choice(ALPH) for _ in range(n))
    return f"{prefix}-{stamp}-{tail}"


def unique_code(model, field: str, prefix: str) -> str:
    code = generate_code(prefix)
    while model.objects.filter(**{field: code}).exists():
        code = generate_code(prefix)
    return code
