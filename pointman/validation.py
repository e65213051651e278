"""
Input validation for ledger operations.

validate_payer / validate_points / validate_spend_amount guard the service.
parse_grant_payload / parse_spend_payload turn raw request bodies into
arguments for it. Every failure raises InvalidRequest; nothing here touches
the database.
"""

import json

from pointman.exceptions import InvalidRequest

PAYER_MAX_LENGTH = 255

# IntegerField range on every supported backend
POINTS_MIN = -(2**31)
POINTS_MAX = 2**31 - 1


def validate_payer(payer) -> str:
    """Return the stripped payer or raise InvalidRequest."""
    if not isinstance(payer, str):
        raise InvalidRequest("Payer must be a string", field="payer")
    payer = payer.strip()
    if not payer:
        raise InvalidRequest("Payer must not be empty", field="payer")
    if "\x00" in payer:
        raise InvalidRequest("Payer must not contain NUL characters", field="payer")
    try:
        payer.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidRequest("Payer is not valid Unicode text", field="payer")
    if len(payer) > PAYER_MAX_LENGTH:
        raise InvalidRequest(
            f"Payer must be at most {PAYER_MAX_LENGTH} characters",
            field="payer",
        )
    return payer


def validate_points(points) -> int:
    """Points must be an integer. bool is rejected even though it subclasses int."""
    if isinstance(points, bool) or not isinstance(points, int):
        raise InvalidRequest("Points must be an integer", field="points")
    if not POINTS_MIN <= points <= POINTS_MAX:
        raise InvalidRequest("Points out of range", field="points", points=points)
    return points


def validate_spend_amount(points) -> int:
    points = validate_points(points)
    if points <= 0:
        raise InvalidRequest("Points to spend must be positive", field="points", points=points)
    return points


def validate_limit(limit) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidRequest("Limit must be an integer", field="limit")
    if limit < 1:
        raise InvalidRequest("Limit must be positive", field="limit", limit=limit)
    return limit


def _load_object(body) -> dict:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidRequest("Request body is not valid UTF-8")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except (json.JSONDecodeError, ValueError):
            raise InvalidRequest("Invalid JSON")
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return body


def parse_grant_payload(body) -> tuple[str, int]:
    """
    Parse an add-points request.

    Args:
        body: Raw bytes/str JSON or an already-decoded dict
            ({"payer": "DANNON", "points": 300})

    Returns:
        (payer, points)

    Raises:
        InvalidRequest: On malformed JSON, missing keys or wrong types
    """
    data = _load_object(body)
    for key in ("payer", "points"):
        if key not in data:
            raise InvalidRequest(f"Missing field: {key}", field=key)
    return validate_payer(data["payer"]), validate_points(data["points"])


def parse_spend_payload(body) -> int:
    """Parse a spend-points request ({"points": 5000}) into a positive int."""
    data = _load_object(body)
    if "points" not in data:
        raise InvalidRequest("Missing field: points", field="points")
    return validate_spend_amount(data["points"])
