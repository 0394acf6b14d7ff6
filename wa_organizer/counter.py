"""Estimate how many message cards a pasted block of WhatsApp text holds.

The number is only shown as a badge next to the input box. The real
organizing is done by the model, so these rules are deliberately loose.
"""

import re

# *** , ----- , ===== , _____ or an "المجموع :" (total) line
SEPARATOR_PATTERN = re.compile(r"^(?:\*{3,}|-{5,}|={5,}|_{5,}|المجموع(?:\s*:.*|\s*))$")

# Lines that usually open a new message
DATETIME_PATTERN = re.compile(r"^\[?\d{1,2}/\d{1,2}/\d{2,4},\s*\d{1,2}:\d{2}(?::\d{2})?")
PHONE_OR_ID_PATTERN = re.compile(r"^(?:\+?\d[\d\s-]{7,}|(?:ID|الايدي|ايدي|آيدي)\s*:)", re.IGNORECASE)
MENTION_PATTERN = re.compile(r"^[@#]")
LABEL_PATTERN = re.compile(r"^[A-Za-z\u0621-\u064A]+[:|-]")

MESSAGE_START_PATTERNS = (
    DATETIME_PATTERN,
    PHONE_OR_ID_PATTERN,
    MENTION_PATTERN,
    LABEL_PATTERN,
)

# Summary block written by the model ("عدد الرسائل" = message count)
COUNT_LINE_PREFIX = "عدد الرسائل"


def is_separator_line(line):
    return bool(SEPARATOR_PATTERN.match(line.strip()))


def looks_like_message_start(line):
    stripped = line.strip()
    if not stripped:
        return False
    return any(pattern.match(stripped) for pattern in MESSAGE_START_PATTERNS)


def split_message_blocks(text, heuristic=True):
    """Split pasted text into message blocks.

    Blank lines and separator lines always close a block. With ``heuristic``
    on, a line that looks like the first line of a new message closes the
    block too, unless it directly follows a separator.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    groups = []
    current = []
    previous = None

    def commit():
        if any(item.strip() for item in current):
            groups.append(list(current))
        current.clear()

    for line in lines:
        if not line.strip():
            commit()
        elif is_separator_line(line):
            commit()
        elif (
            heuristic
            and current
            and looks_like_message_start(line)
            and not (previous is not None and is_separator_line(previous))
        ):
            commit()
            current.append(line)
        else:
            current.append(line)
        previous = line
    commit()

    blocks = []
    for group in groups:
        block = "\n".join(group).strip()
        if not block or block.startswith(COUNT_LINE_PREFIX):
            continue
        blocks.append(block)
    return blocks


def count_message_blocks(text, heuristic=True):
    return len(split_message_blocks(text, heuristic=heuristic))
