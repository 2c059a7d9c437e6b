from __future__ import annotations

from typing import Any, Iterable, Optional

from flask import jsonify, request


def ok(data: Any = None, message: str = "OK", status: int = 200):
    body = {"message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def paged(rows: Iterable[Any], total: int, page: int, limit: int, message: str = "OK"):
    return jsonify(
        {
            "message": message,
            "data": [r.to_dict() for r in rows],
            "pagination": {"page": page, "limit": limit, "total": total, "pages": (total + limit - 1) // limit},
        }
    )


def json_body() -> dict:
    """The JSON object body; arrays, scalars and malformed bodies read as empty."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def form_or_json() -> dict:
    """JSON body, or the form fields of a multipart request."""
    if request.mimetype == "multipart/form-data" or request.form:
        return request.form.to_dict()
    return json_body()


def query(name: str, default: Optional[str] = None) -> Optional[str]:
    value = request.args.get(name)
    return value if value not in (None, "") else default
