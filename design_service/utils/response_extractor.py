"""
Tolerant extraction of structured payloads from generated text.

Nothing in here raises on bad input: every function returns an
``ExtractionResult`` holding either the value or a ``ParseError``.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from design_service.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_FENCED_JSON = re.compile(r"```(?:json|JSON)?\s*\n([\s\S]*?)```")
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ParseError:
    """Why a payload could not be extracted"""
    reason: str
    snippet: str = ""

    def __str__(self) -> str:
        return self.reason


@dataclass
class ExtractionResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ParseError] = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None and self.value is not None else default


@dataclass(frozen=True)
class SectionRule:
    """
    One field of a delimited text payload.

    ``pattern`` must expose the captured text as group 1. ``transform``
    turns that text into the field value; ``default`` is used when the
    pattern does not match or the transform yields nothing.
    """
    field: str
    pattern: str
    default: Any = None
    transform: Optional[Callable[[str], Any]] = None
    flags: int = re.IGNORECASE

    def apply(self, text: str) -> Any:
        match = re.search(self.pattern, text, self.flags)
        if not match:
            return None
        captured = match.group(1).strip()
        if not captured:
            return None
        return self.transform(captured) if self.transform else captured


@dataclass
class SectionExtraction:
    values: Dict[str, Any] = field(default_factory=dict)
    matched: List[str] = field(default_factory=list)


def strip_code_fences(text: str) -> str:
    """Drop a surrounding markdown fence (with or without language tag)"""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:])
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def repair_json(text: str) -> str:
    """Fix the usual model-output JSON mistakes"""
    text = text.replace("{{", "{").replace("}}", "}")

    text = re.sub(r":\s*True\b", ": true", text)
    text = re.sub(r":\s*False\b", ": false", text)
    text = re.sub(r":\s*None\b", ": null", text)

    # Trailing commas
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)

    # Single-quoted keys and values
    text = re.sub(r"'(\w+)'\s*:", r'"\1":', text)
    text = re.sub(r":\s*'([^'\n]*)'", r': "\1"', text)

    # Unquoted keys directly after { or ,
    text = re.sub(r"([{,]\s*)([A-Za-z_][\w-]*)(\s*:)", r'\1"\2"\3', text)

    return text


def _balanced_object(text: str) -> Optional[str]:
    """First brace-balanced object, ignoring braces inside strings"""
    depth = 0
    start = -1
    in_string = False
    escaped = False

    for i, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start != -1:
                return text[start:i + 1]

    return None


def _candidates(text: str) -> List[str]:
    candidates: List[str] = []

    for fenced in _FENCED_JSON.findall(text):
        fenced = fenced.strip()
        if fenced.startswith("{"):
            candidates.append(fenced)

    greedy = _GREEDY_OBJECT.search(text)
    if greedy:
        candidates.append(greedy.group(0))

    balanced = _balanced_object(text)
    if balanced:
        candidates.append(balanced)

    # Preserve order, drop duplicates
    return list(dict.fromkeys(candidates))


def extract_json_object(text: Optional[str]) -> ExtractionResult[Dict[str, Any]]:
    """
    Extract exactly one JSON object from free-form text.

    Tries fenced ```json blocks, then the outermost ``{...}`` span, then the
    first balanced object; each candidate is parsed as-is and then repaired.
    """
    if not text or not text.strip():
        return ExtractionResult(error=ParseError("empty response"))

    candidates = _candidates(strip_code_fences(text)) or _candidates(text)
    if not candidates:
        return ExtractionResult(error=ParseError("no JSON object found", text[:200]))

    last_error = ""
    for candidate in candidates:
        for repaired in (False, True):
            payload = repair_json(candidate) if repaired else candidate
            try:
                value = json.loads(payload)
            except json.JSONDecodeError as e:
                last_error = str(e)
                continue

            if not isinstance(value, dict):
                last_error = f"expected an object, got {type(value).__name__}"
                continue

            if repaired:
                logger.debug("extractor.json.repaired", extra={"chars": len(payload)})
            return ExtractionResult(value=value, repaired=repaired)

    return ExtractionResult(
        error=ParseError(f"malformed JSON payload: {last_error}", candidates[0][:200])
    )


def extract_sections(text: Optional[str], rules: Sequence[SectionRule]) -> ExtractionResult[SectionExtraction]:
    """
    Apply declared (field, pattern, default) rules to one text payload.

    Every field is always present in the result, defaulted when unmatched.
    The result carries a ParseError only when no rule matched at all.
    """
    extraction = SectionExtraction()
    body = text or ""

    for rule in rules:
        try:
            value = rule.apply(body)
        except (ValueError, TypeError) as e:
            logger.debug(
                "extractor.section.transform_failed",
                extra={"field": rule.field, "error": str(e)}
            )
            value = None

        if value is None or value == [] or value == "":
            extraction.values[rule.field] = rule.default() if callable(rule.default) else rule.default
        else:
            extraction.values[rule.field] = value
            extraction.matched.append(rule.field)

    if not extraction.matched:
        return ExtractionResult(
            value=extraction,
            error=ParseError("no recognised sections", body[:200])
        )

    return ExtractionResult(value=extraction)


def coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def coerce_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
