"""
HTTP access for the fetch-based construction methods.

Every failure (connection problems, timeouts, error status codes) is raised as
TransportError; nothing here returns a partial or empty body.
"""

from typing import Any, Dict, Mapping, Optional

import requests

from .errors import TransportError

DEFAULT_TIMEOUT = 30.0


def stringify_args(args: Optional[Mapping[Any, Any]]) -> Dict[str, str]:
    """Form/query arguments are sent as strings; anything else is converted with str()."""
    if not args:
        return {}
    return {str(k): v if isinstance(v, str) else str(v) for k, v in args.items()}


def _body(url: str, response: requests.Response) -> str:
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise TransportError(url, str(e)) from e
    return response.text


def http_get(url: str, args: Optional[Mapping[Any, Any]] = None,
             headers: Optional[Mapping[str, str]] = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    try:
        response = requests.get(url, params=stringify_args(args), headers=dict(headers or {}), timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(url, str(e)) from e
    return _body(url, response)


def http_post(url: str, args: Optional[Mapping[Any, Any]] = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    try:
        response = requests.post(url, data=stringify_args(args), timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(url, str(e)) from e
    return _body(url, response)
