"""Search text sanitization and validation.

The deny-list below is a heuristic layer only. Every store query is
parameterized regardless of what passes here.
"""

import re
from dataclasses import dataclass

MAX_QUERY_LENGTH = 100

EMPTY_QUERY = "Search query cannot be empty"
QUERY_TOO_LONG = f"Search query is too long (maximum {MAX_QUERY_LENGTH} characters)"
MALICIOUS_QUERY = "Search query contains invalid characters or patterns"
ONLY_INVALID_CHARACTERS = "Search query contains only invalid characters"

# C0 controls, DEL and C1 controls
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_WHITESPACE_RUN = re.compile(r"\s+")

_MALICIOUS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        # SQL statements: keyword followed by the clause that makes it a statement
        r"\b(drop|alter|truncate|create)\s+(table|database|schema|index|view|function)\b",
        r"\bunion\s+(all\s+)?select\b",
        r"\bselect\b.+\bfrom\b",
        r"\binsert\s+into\b",
        r"\bdelete\s+from\b",
        r"\bupdate\s+\w+\s+set\b",
        r"\bexec(ute)?\s+(sp_|xp_)\w*",
        r";\s*(drop|alter|truncate|create|delete|insert|update|select|exec)\b",
        r"'\s*(or|and)\s+('|\d)",
        r"('|;)\s*(--|#|/\*)",
        # Markup and script injection
        r"<\s*/?\s*script\b",
        r"<\s*(iframe|object|embed|svg|img)\b",
        r"\b(javascript|vbscript)\s*:",
        r"\bon[a-z]+\s*=",
        r"\bdata\s*:\s*text/html",
    )
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one search string.

    Attributes:
        is_valid: Whether the query may be used
        sanitized: Sanitized text when valid, otherwise None
        error: User-safe rejection reason when invalid, otherwise None
    """

    is_valid: bool
    sanitized: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, sanitized: str) -> "ValidationResult":
        return cls(is_valid=True, sanitized=sanitized)

    @classmethod
    def reject(cls, error: str) -> "ValidationResult":
        return cls(is_valid=False, error=error)


def sanitize_search_query(raw: str) -> str:
    """Strip control characters, truncate, collapse whitespace and trim.

    Args:
        raw: Untrusted search text

    Returns:
        The sanitized text (possibly empty)
    """
    text = _CONTROL_CHARS.sub("", raw)
    text = text[:MAX_QUERY_LENGTH]
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def is_malicious(text: str) -> bool:
    """Check text against the SQL and script injection deny-list."""
    return any(pattern.search(text) for pattern in _MALICIOUS_PATTERNS)


def validate_search_query(raw: str | None) -> ValidationResult:
    """Validate and sanitize raw search text.

    Checks run in order: empty, too long, deny-list, then sanitization.
    Pure function of its input.

    Args:
        raw: Untrusted search text from the request

    Returns:
        ValidationResult with either the sanitized text or a rejection reason
    """
    if raw is None or not raw.strip():
        return ValidationResult.reject(EMPTY_QUERY)

    if len(raw) > MAX_QUERY_LENGTH:
        return ValidationResult.reject(QUERY_TOO_LONG)

    if is_malicious(raw):
        return ValidationResult.reject(MALICIOUS_QUERY)

    sanitized = sanitize_search_query(raw)
    if not sanitized:
        return ValidationResult.reject(ONLY_INVALID_CHARACTERS)

    # Control characters can split a keyword in the raw text
    if is_malicious(sanitized):
        return ValidationResult.reject(MALICIOUS_QUERY)

    return ValidationResult.ok(sanitized)
