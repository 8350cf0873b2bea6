"""
AJAX request and response helpers.

Thin layer over requests with done/fail/always callbacks. Every failure,
whether transport, HTTP status, undecodable body or an exception raised by
the done callback, is routed to a single fail callback.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Optional

import requests

from .alerts import AlertIcon, UNKNOWN_ERROR, error_message

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

CONTENT_TYPES = {
    'json': 'application/json',
    'form': 'application/x-www-form-urlencoded',
}


class AjaxMethod(str, Enum):
    """Enum for AJAX methods"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"


def string_to_ajax_method(s: Optional[str]) -> AjaxMethod:
    """
    Cast a string to an AjaxMethod. None means GET.

    Raises:
        ValueError: If the string is not a known method
    """
    if s is None:
        return AjaxMethod.GET
    if isinstance(s, AjaxMethod):
        return s
    try:
        return AjaxMethod(s)
    except ValueError:
        raise ValueError(f"AJAX method invalid: {s}")


def ajax_request(
    method,
    url: str,
    done: Callable[[Any, int, requests.Response], Any],
    payload: Optional[Any] = None,
    content_type: Optional[str] = None,
    fail: Optional[Callable[[Any, Optional[int], Optional[requests.Response]], Any]] = None,
    always: Optional[Callable[[], Any]] = None,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
    alert=None
) -> Optional[requests.Response]:
    """
    Send an AJAX request.

    Args:
        method: AjaxMethod or method name
        url: Request URL
        done: Called with (data, status, response) for a 2xx JSON response
        payload: Request body, JSON encoded. Not allowed for GET and HEAD
        content_type: Content-Type for the payload, "json", "form" or a full type
        fail: Called with (error, status, response) on any failure
        always: Called last, whatever the outcome
        session: requests session to send with
        timeout: Seconds before giving up
        alert: Alert handler used when no fail callback is given

    Returns:
        The response, or None on a transport error

    Raises:
        ValueError: If the method, payload or URL is invalid
    """
    method = string_to_ajax_method(method)

    if method in (AjaxMethod.GET, AjaxMethod.HEAD) and payload is not None:
        raise ValueError(f"Payload unacceptable for {method.value} method.")

    if not url or not str(url).strip():
        raise ValueError("URL not specified.")

    headers = {'Accept': 'application/json'}
    data = None
    if payload is not None:
        headers['Content-Type'] = (
            CONTENT_TYPES.get(content_type, content_type) or CONTENT_TYPES['form']
        )
        data = json.dumps(payload)

    http = session or requests
    response = None

    try:
        try:
            response = http.request(method.value, url, headers=headers, data=data, timeout=timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"AJAX {method.value} {url} failed: {e}")
            if fail is not None:
                fail(str(e), None, None)
            else:
                handle_ajax_error('', None, None, alert=alert)
            return None

        if not 200 <= response.status_code < 300:
            logger.warning(f"AJAX {method.value} {url} returned {response.status_code}")
            if fail is not None:
                fail(response.text, response.status_code, response)
            else:
                handle_ajax_error(response.text, response.status_code, response, alert=alert)
            return response

        try:
            done(response.json(), response.status_code, response)
        except Exception as e:
            logger.warning(f"AJAX {method.value} {url} response not handled: {e}")
            if fail is not None:
                fail(e, response.status_code, response)
            else:
                error_message(str(e), icon=AlertIcon.ERROR, alert=alert)

        return response
    finally:
        if always is not None:
            always()


def validate_ajax_response(
    data,
    status: Optional[int],
    response: Optional[requests.Response],
    no_success_key: bool = False,
    no_alert: bool = False,
    error_prefix: Optional[str] = None,
    alert=None,
    redirect: Optional[Callable[[str], Any]] = None
) -> bool:
    """
    Validate a decoded AJAX response.

    A valid response is a JSON object without an "error" key and, unless
    no_success_key is set, with a truthy "success" key. A "redirect" key is
    handed to the redirect callback.

    Returns:
        True if the response was successfully handled
    """
    if not isinstance(data, dict):
        error_message(
            "Unexpected response from server.",
            icon=AlertIcon.WARNING,
            no_alert=no_alert,
            prefix=error_prefix,
            alert=alert
        )
        return False

    if data.get('error'):
        error_message(
            str(data['error']),
            icon=AlertIcon.ERROR,
            no_alert=no_alert,
            prefix=error_prefix,
            alert=alert
        )
        return False

    if not no_success_key and not data.get('success'):
        error_message(
            "No response from server.",
            icon=AlertIcon.WARNING,
            no_alert=no_alert,
            prefix=error_prefix,
            alert=alert
        )
        return False

    if data.get('redirect') and redirect is not None:
        redirect(data['redirect'])

    return True


def handle_ajax_error(
    text,
    status: Optional[int],
    response: Optional[requests.Response],
    no_alert: bool = False,
    error_prefix: Optional[str] = None,
    alert=None
) -> str:
    """
    Report a failed AJAX request.

    The message is the "error" string of a JSON body if there is one, else
    the error text, else the status code.

    Returns:
        The error message
    """
    error = UNKNOWN_ERROR

    body_error = _response_error(response)
    if body_error:
        error = body_error
    elif text and str(text).strip():
        error = str(text).strip()
    elif status is not None:
        error = f"Code {status} error."

    return error_message(error, icon=AlertIcon.ERROR, no_alert=no_alert, prefix=error_prefix, alert=alert)


def _response_error(response: Optional[requests.Response]) -> Optional[str]:
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get('error'), str) and body['error']:
        return body['error']
    return None
