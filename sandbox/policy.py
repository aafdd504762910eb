"""
Query admission policy for the workshop sandbox.

The policy is lexical: the whole query text is uppercased and scanned for
banned keywords as plain substrings, then checked for a leading SELECT. It
does not parse SQL, so a banned word inside a string literal, a comment or an
identifier (``created_at``) also rejects the query. False positives are
acceptable here; false negatives are not.
"""

from __future__ import annotations

from dataclasses import dataclass

from sandbox.failures import AdmissionRejected

BANNED_KEYWORDS = [
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "CREATE",
    "ALTER",
    "TRUNCATE",
    "GRANT",
    "REVOKE",
    "EXEC",
    "EXECUTE",
    "UNION",
    "ATTACH",
    "DETACH",
]

REQUIRED_PREFIX = "SELECT"


@dataclass(frozen=True)
class AdmissionVerdict:
    accepted: bool
    query: str | None = None
    reason: str | None = None

    @classmethod
    def accept(cls, query: str) -> "AdmissionVerdict":
        return cls(accepted=True, query=query)

    @classmethod
    def reject(cls, reason: str) -> "AdmissionVerdict":
        return cls(accepted=False, reason=reason)


def find_banned_keyword(raw_query: str) -> str | None:
    """Return the first banned keyword found anywhere in the text, if any."""
    upper_query = raw_query.upper()
    for keyword in BANNED_KEYWORDS:
        if keyword in upper_query:
            return keyword
    return None


def admit(raw_query: str) -> AdmissionVerdict:
    keyword = find_banned_keyword(raw_query)
    if keyword is not None:
        return AdmissionVerdict.reject(f"'{keyword}' statements are not allowed")

    if not raw_query.strip().upper().startswith(REQUIRED_PREFIX):
        return AdmissionVerdict.reject(f"query must start with {REQUIRED_PREFIX}")

    return AdmissionVerdict.accept(raw_query)


def require_admission(raw_query: str) -> str:
    """Return the admitted query or raise AdmissionRejected with the reason."""
    verdict = admit(raw_query)
    if not verdict.accepted or verdict.query is None:
        raise AdmissionRejected(verdict.reason or "query rejected by sandbox policy")
    return verdict.query
