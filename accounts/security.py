"""
Login flow helpers: route names, session keys and redirect targets.
"""

from functools import wraps
from typing import Optional

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import REDIRECT_FIELD_NAME
from django.shortcuts import redirect, resolve_url
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext as _

LOGIN_ROUTE = 'accounts:login'
LOGGED_IN_ROUTE = 'accounts:index'
LOGOUT_ROUTE = 'accounts:logout'
LOGGED_OUT_ROUTE = 'home:index'

TARGET_PATH_SESSION_KEY = '_security.target_path'
LAST_USERNAME_SESSION_KEY = '_security.last_username'


def get_client_ip(request) -> Optional[str]:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded and getattr(settings, 'USE_X_FORWARDED_FOR', False):
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def is_safe_target(request, target: Optional[str]) -> bool:
    return bool(target) and url_has_allowed_host_and_scheme(
        target,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure()
    )


def save_target_path(request, path: str):
    """Remember where to send the user once they have logged in"""
    request.session[TARGET_PATH_SESSION_KEY] = path


def pop_target_path(request) -> Optional[str]:
    return request.session.pop(TARGET_PATH_SESSION_KEY, None)


def get_success_url(request) -> str:
    """
    Where to redirect after a successful login or registration.

    Order: a safe `next` parameter, the stored target path, the account page.
    """
    target = pop_target_path(request)

    next_url = request.POST.get(REDIRECT_FIELD_NAME) or request.GET.get(REDIRECT_FIELD_NAME)
    if is_safe_target(request, next_url):
        return next_url

    if is_safe_target(request, target):
        return target

    return resolve_url(LOGGED_IN_ROUTE)


def login_required(view_func):
    """
    Decorator requiring an authenticated user.
    Anonymous visitors are sent to the login page and returned here afterwards.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            save_target_path(request, request.get_full_path())
            messages.info(request, _("Please login to continue."))
            return redirect(LOGIN_ROUTE)
        return view_func(request, *args, **kwargs)
    return wrapper
