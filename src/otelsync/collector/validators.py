"""Validation and normalization of vendor-specific destination fields.

Every function here either returns a normalized value or raises
FieldValidationError with a cause suitable for an operator log line.
"""

from __future__ import annotations

import json
from urllib.parse import urlsplit, urlunsplit

from otelsync.exceptions import FieldValidationError

# Raw label values that mean "no labels"
EMPTY_LABELS = ("", "[]")


def endpoint_url(
    raw: str,
    *,
    path: str,
    scheme: str = "https",
    fill_missing_path: bool = True,
) -> str:
    """Normalize an endpoint URL that must point at a fixed vendor path.

    Vendor consoles hand out endpoints in several shapes: bare hosts,
    hosts with a scheme, or full push URLs with credentials embedded.
    Only the first two are accepted. Credentials must come from dedicated
    destination fields so they never end up in the collector config.

    Args:
        raw: URL as typed by the user. `https://` is assumed when the
            value carries no scheme.
        path: The only path the vendor accepts, e.g. "/loki/api/v1/push".
        scheme: Required URL scheme.
        fill_missing_path: If True, an empty path is replaced with `path`.

    Returns:
        The normalized URL.

    Raises:
        FieldValidationError: On parse failure, wrong scheme, wrong path,
            missing host or embedded user info.
    """
    raw = raw.strip()
    url_with_scheme = raw if "://" in raw else f"https://{raw}"

    try:
        parsed = urlsplit(url_with_scheme)
        # Raises ValueError for a non-numeric or out-of-range port
        parsed.port
    except ValueError as e:
        raise FieldValidationError(f"cannot parse endpoint url '{raw}': {e}") from e

    if parsed.scheme != scheme:
        raise FieldValidationError(
            f"unexpected scheme '{parsed.scheme}', only {scheme} is supported"
        )

    url_path = parsed.path
    if not url_path and fill_missing_path:
        url_path = path
    if url_path != path:
        raise FieldValidationError(
            f"unexpected path '{url_path}' for endpoint, expected '{path}'"
        )

    if parsed.username is not None or parsed.password is not None:
        raise FieldValidationError(
            "unexpected user info in endpoint url, "
            "credentials must be provided as separate fields"
        )

    if not parsed.hostname:
        raise FieldValidationError(f"endpoint url '{raw}' has no host")

    return urlunsplit(parsed._replace(path=url_path))


def label_list(raw: str | None) -> list[str]:
    """Decode a JSON list of attribute names.

    An absent, empty or "[]" value is valid and yields no labels. Order is
    preserved so generated statements are stable.
    """
    if raw is None or raw.strip() in EMPTY_LABELS:
        return []

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FieldValidationError(f"labels are not valid JSON: {e}") from e

    if not isinstance(decoded, list) or not all(isinstance(item, str) for item in decoded):
        raise FieldValidationError("labels must be a JSON list of strings")

    return decoded


def label_map(raw: str | None) -> dict[str, str]:
    """Decode a JSON object of label name to label value."""
    if raw is None or not raw.strip():
        return {}

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FieldValidationError(f"labels are not valid JSON: {e}") from e

    if not isinstance(decoded, dict) or not all(
        isinstance(key, str) and isinstance(value, str)
        for key, value in decoded.items()
    ):
        raise FieldValidationError("labels must be a JSON object of strings")

    return decoded


def attribute_projection_statements(labels: list[str]) -> list[str]:
    """Build transform statements copying resource attributes onto records."""
    return [
        f'set(attributes["{label}"], resource.attributes["{label}"])'
        for label in labels
    ]
