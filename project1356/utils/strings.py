import re
from typing import List

DAY_SEPARATOR = re.compile(r"\s*,\s*")


def parse_custom_days(text: str) -> List[int]:
    if not text:
        return []
    days: List[int] = []
    for chunk in DAY_SEPARATOR.split(text.strip()):
        try:
            day = int(chunk)
        except ValueError:
            continue
        if day > 0 and day not in days:
            days.append(day)
    return days


def mask_partial(title: str) -> str:
    return "".join(char if idx % 3 == 0 else "•" for idx, char in enumerate(title))
