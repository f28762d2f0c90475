import secrets
import time

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SIZE = 9


def generate_id() -> str:
    # Timestamp prefix plus a short base36 suffix, matching ids already in stored records.
    suffix = "".join(secrets.choice(ALPHABET) for _ in range(SIZE))
    return f"{int(time.time() * 1000)}-{suffix}"
