"""
Checks for values that reach the filesystem or SQL text.

Record ids become paths under the catalog root and table names are
interpolated into DDL, so both are validated before use.
"""

import re

RECORD_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_\-\.]+(/[a-zA-Z0-9_\-\.]+)*$")
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

MAX_RECORD_ID_LENGTH = 255
MAX_IDENTIFIER_LENGTH = 63  # PostgreSQL NAMEDATALEN - 1

RESERVED_TABLE_NAMES = frozenset({
    "select", "insert", "update", "delete", "drop", "create", "alter",
    "table", "database", "index", "view", "user", "grant", "revoke",
})


class ValidationError(ValueError):
    """Raised when a CLI argument or identifier is unusable."""


def _require_int(value, field_name: str) -> int:
    # bool is an int subclass
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer, got {type(value).__name__}")
    return value


def validate_record_id(record_id: str, field_name: str = "record_id") -> str:
    """
    Normalize a catalog-relative folder path such as ``ofl/aclonica``.

    Surrounding whitespace and slashes are dropped. Segments may hold
    letters, digits, ``-``, ``_`` and ``.``; a ``..`` segment is refused
    so the path cannot leave the catalog root.

    Raises:
        ValidationError: If the id is empty, escapes the root or has other characters
    """
    if not record_id or not isinstance(record_id, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    record_id = record_id.strip().strip("/")
    if not record_id:
        raise ValidationError(f"{field_name} cannot be empty or whitespace-only")

    if ".." in record_id.split("/"):
        raise ValidationError(f"{field_name} contains path traversal characters (..)")

    if not RECORD_ID_PATTERN.match(record_id):
        raise ValidationError(
            f"{field_name} contains invalid characters: {record_id!r} "
            "(expected slash-separated folder names)"
        )

    if len(record_id) > MAX_RECORD_ID_LENGTH:
        raise ValidationError(f"{field_name} exceeds maximum length of {MAX_RECORD_ID_LENGTH} characters")

    return record_id


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 10000) -> int:
    """Page sizes and match counts: a positive integer no larger than ``max_limit``."""
    limit = _require_int(limit, field_name)
    if limit <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got {limit}")
    if limit > max_limit:
        raise ValidationError(f"{field_name} exceeds maximum of {max_limit}")
    return limit


def validate_offset(offset: int, field_name: str = "offset") -> int:
    """Resume positions (``--start``, ``--page``, ``--index``): zero or more."""
    offset = _require_int(offset, field_name)
    if offset < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer, got {offset}")
    return offset


def sanitize_sql_identifier(identifier: str, field_name: str = "identifier") -> str:
    """
    Accept a table name for use in composed SQL.

    Examples:
        >>> sanitize_sql_identifier("fonts")
        'fonts'
    """
    if not identifier or not isinstance(identifier, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    identifier = identifier.strip()

    if not IDENTIFIER_PATTERN.match(identifier):
        raise ValidationError(
            f"{field_name} contains invalid characters: {identifier!r} "
            "(letters, digits and underscores, not starting with a digit)"
        )

    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(
            f"{field_name} exceeds PostgreSQL maximum length of {MAX_IDENTIFIER_LENGTH} characters"
        )

    if identifier.lower() in RESERVED_TABLE_NAMES:
        raise ValidationError(f"{field_name} '{identifier}' is a reserved SQL keyword")

    return identifier
