"""Post-processing of the model's answer, plus copy/export helpers."""

import datetime
import re

ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
TO_ASCII_DIGITS = str.maketrans(ARABIC_DIGITS + PERSIAN_DIGITS, "0123456789" * 2)
TO_ARABIC_DIGITS = str.maketrans("0123456789,", ARABIC_DIGITS + "٬")

# "عدد الرسائل المحللة : N" = "messages analyzed: N"
SUMMARY_PATTERN = re.compile(r"عدد الرسائل المحللة\s*:\s*[0-9٠-٩۰-۹]+")


def normalize_digits(text):
    return text.translate(TO_ASCII_DIGITS)


def split_summary(result):
    """Split the trailing "messages analyzed" line off the model output.

    Returns ``(body, summary)``. The summary has its digits normalized to
    ASCII; it is an empty string when the model did not write one.
    """
    result = result.strip()
    matches = list(SUMMARY_PATTERN.finditer(result))
    if not matches:
        return result, ""
    last = matches[-1]
    body = (result[:last.start()] + result[last.end():]).rstrip()
    return body, normalize_digits(last.group(0).strip())


def combine_output(body, summary):
    if summary:
        return f"{body}\n\n{summary}".strip()
    return body


def export_filename(day=None):
    day = day or datetime.datetime.now(datetime.timezone.utc).date()
    return f"whatsapp-organized-{day.isoformat()}.txt"


def format_count(n):
    """1234 -> "١٬٢٣٤", the way the count shows under the text boxes."""
    return f"{n:,}".translate(TO_ARABIC_DIGITS)
