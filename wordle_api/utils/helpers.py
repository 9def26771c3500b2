"""
Helper Functions

Contains utility functions used throughout the application.
"""

import datetime
from typing import Any, Dict, Optional

from flask import request


def utcnow() -> datetime.datetime:
    """Naive UTC timestamp, the form pymongo hands back by default."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def isoformat(value: Optional[datetime.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def get_request_params(request_obj=None) -> Dict[str, Any]:
    """
    Merge query string, form fields and JSON body into one parameter bag.
    Later sources win, so the body takes precedence over the query string.
    """
    if request_obj is None:
        request_obj = request

    params: Dict[str, Any] = {}
    params.update(request_obj.args.to_dict())
    params.update(request_obj.form.to_dict())

    body = request_obj.get_json(silent=True)
    if isinstance(body, dict):
        params.update(body)

    return params

