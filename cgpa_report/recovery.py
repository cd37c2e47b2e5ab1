"""
Recovering course records from decompressed payload text.

The student app's share feature does not always emit JSON. Some builds send
a JavaScript object literal instead:

    {id: 12, cgpa: 8.47, courses: [{course_title: Modern Physics, credits: 4.0, grade: S}]}

Three strategies are tried in order and the first one that yields records
wins:

    strict      json.loads on the text as-is
    salvage     quote bareword keys and values, then json.loads
    structural  cut the `courses` array out by bracket counting and read
                `key: value` pairs segment by segment

Each strategy returns an Attempt instead of raising, so the chain is a plain
loop. Only iter_record_candidates raises, and only when every strategy failed.
"""

import json
import re
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

from .app_logger import get_logger
from .errors import ParseError

log = get_logger("recovery")


class Attempt(NamedTuple):
    strategy: str
    records: Optional[List[dict]]
    envelope: Dict[str, object]
    error: Optional[str]

    @property
    def ok(self) -> bool:
        return self.error is None


def _success(strategy: str, records: list, envelope: dict = None) -> Attempt:
    records = [r for r in records if isinstance(r, dict)]
    if not records:
        return _failure(strategy, "no records found")
    return Attempt(strategy, records, dict(envelope or {}), None)


def _failure(strategy: str, reason: str) -> Attempt:
    return Attempt(strategy, None, {}, reason)


def _from_document(strategy: str, doc) -> Attempt:
    if isinstance(doc, list):
        return _success(strategy, doc)
    if isinstance(doc, dict) and isinstance(doc.get("courses"), list):
        envelope = {k: v for k, v in doc.items() if k != "courses"}
        return _success(strategy, doc["courses"], envelope)
    return _failure(strategy, f"unexpected document shape: {type(doc).__name__}")


# ------------------------
# Strict JSON
# ------------------------
def parse_strict(text: str) -> Attempt:
    try:
        doc = json.loads(text)
    except (ValueError, RecursionError) as e:
        return _failure("strict", f"not JSON ({e})")
    return _from_document("strict", doc)


# ------------------------
# Salvage: pseudo-JS literal -> JSON
# ------------------------
# Optional quote is back-referenced so that "key": and 'key': are accepted
# alongside bare key:
_KEY_RE = re.compile(r"\s*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\s*:")
_JSON_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?$")
_LITERALS = frozenset(("true", "false", "null"))


def _string_end(text: str, start: int) -> int:
    """Index just past the double-quoted string opening at `start`."""
    i = start + 1
    n = len(text)
    while i < n:
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return n


def _quote_scalar(token: str) -> str:
    if not token:
        return '""'
    if token in _LITERALS or _JSON_NUMBER_RE.match(token):
        return token
    if len(token) >= 2 and token[0] == token[-1] == "'":
        token = token[1:-1]
    return json.dumps(token, ensure_ascii=False)


def _take_value(text: str, i: int) -> Tuple[str, int]:
    """
    Rewrite the value starting at `i` (just after a key's colon).

    Returns the replacement text and the index where scanning resumes.
    Quoted strings and nested objects/arrays are left for the caller.
    """
    n = len(text)
    j = i
    while j < n and text[j].isspace():
        j += 1
    lead = text[i:j]
    if j >= n or text[j] in '"{[':
        return lead, j

    k = j
    if text[j] == "'":
        close = text.find("'", j + 1)
        if close != -1:
            k = close + 1

    depth = 0
    while k < n:
        c = text[k]
        if c in "{[":
            depth += 1
        elif c in "}]":
            if depth == 0:
                break
            depth -= 1
        elif c == "," and depth == 0:
            break
        k += 1

    raw = text[j:k]
    token = raw.strip()
    trailing = raw[len(raw.rstrip()):]
    return lead + _quote_scalar(token) + trailing, k


def repair_pseudo_json(text: str) -> str:
    """
    Quote bareword keys and unquoted scalar values so that json.loads can
    read a JavaScript-style object literal. Valid JSON passes through
    unchanged; text inside double-quoted strings is never touched.
    """
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif ch in "{,":
            out.append(ch)
            i += 1
            m = _KEY_RE.match(text, i)
            if m:
                out.append(f'{text[i:m.start(1)]}"{m.group(2)}":')
                value, i = _take_value(text, m.end())
                out.append(value)
        elif ch == ":":
            # colon after a key that was already quoted
            out.append(ch)
            value, i = _take_value(text, i + 1)
            out.append(value)
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def parse_salvage(text: str) -> Attempt:
    try:
        doc = json.loads(repair_pseudo_json(text))
    except (ValueError, RecursionError) as e:
        return _failure("salvage", f"still not JSON after repair ({e})")
    return _from_document("salvage", doc)


# ------------------------
# Structural extraction
# ------------------------
_PAIR_RE = re.compile(r"\s*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\s*:\s*(.*?)\s*$", re.S)
_PLAIN_NUMBER_RE = re.compile(r"\d+(\.\d+)?$")


def _matching_bracket(text: str, start: int) -> int:
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i = _string_end(text, i)
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _object_segments(content: str) -> List[str]:
    segments = []
    depth = 0
    begin = 0
    i = 0
    n = len(content)
    while i < n:
        ch = content[i]
        if ch == '"' and depth > 0:
            i = _string_end(content, i)
            continue
        if ch == "{":
            if depth == 0:
                begin = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                segments.append(content[begin:i + 1])
        i += 1
    return segments


def _split_top_level(body: str) -> List[str]:
    parts = []
    depth = 0
    begin = 0
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == '"':
            i = _string_end(body, i)
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[begin:i])
            begin = i + 1
        i += 1
    parts.append(body[begin:])
    return parts


def _scalar(raw: str):
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    if _PLAIN_NUMBER_RE.match(value):
        return float(value) if "." in value else int(value)
    return value


def _read_pairs(body: str) -> Dict[str, object]:
    record = {}
    for part in _split_top_level(body):
        m = _PAIR_RE.match(part)
        if m:
            record[m.group(2)] = _scalar(m.group(3))
    return record


def parse_structural(text: str) -> Attempt:
    courses_idx = text.find("courses")
    if courses_idx == -1:
        return _failure("structural", "no courses section")
    colon = text.find(":", courses_idx)
    if colon == -1:
        return _failure("structural", "malformed courses section")
    start = text.find("[", colon)
    if start == -1:
        return _failure("structural", "no courses array start")
    end = _matching_bracket(text, start)
    if end == -1:
        return _failure("structural", "unterminated courses array")

    records = []
    for segment in _object_segments(text[start + 1:end]):
        record = _read_pairs(segment[1:-1])
        if record:
            records.append(record)

    # student-level fields sit between the opening brace and the courses key
    prefix = text[:courses_idx]
    brace = prefix.find("{")
    envelope = _read_pairs(prefix[brace + 1:]) if brace != -1 else {}
    return _success("structural", records, envelope)


# ------------------------
# Strategy chain
# ------------------------
STRATEGIES: Tuple[Callable[[str], Attempt], ...] = (
    parse_strict,
    parse_salvage,
    parse_structural,
)


def _attempts(text: str) -> Iterator[Attempt]:
    for strategy in STRATEGIES:
        attempt = strategy(text)
        if attempt.ok:
            log.debug("%s parse found %d records", attempt.strategy, len(attempt.records))
        else:
            log.debug("%s parse failed: %s", attempt.strategy, attempt.error)
        yield attempt


def iter_record_candidates(text: str) -> Iterator[Attempt]:
    """
    Yield every successful attempt, in strategy order.

    Raises ParseError, listing each strategy's failure, once the chain is
    exhausted without a single success.
    """
    failures = []
    for attempt in _attempts(text):
        if attempt.ok:
            yield attempt
        else:
            failures.append(f"{attempt.strategy}: {attempt.error}")
    if len(failures) == len(STRATEGIES):
        raise ParseError("no records could be recovered (" + "; ".join(failures) + ")")
