"""
Account views: view, register, edit, login and logout.
"""

import logging

from django.contrib import messages
from django.contrib.auth import login as auth_login
from django.contrib.auth import logout as auth_logout
from django.contrib.auth import update_session_auth_hash
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_http_methods

from .forms import LoginForm, UserForm
from .repositories import UserRepository
from .security import (
    LAST_USERNAME_SESSION_KEY,
    LOGGED_IN_ROUTE,
    LOGGED_OUT_ROUTE,
    LOGIN_ROUTE,
    get_client_ip,
    get_success_url,
    login_required,
)

logger = logging.getLogger(__name__)

AUTHENTICATION_BACKEND = 'accounts.backends.UsernameOrEmailBackend'


@login_required
def index(request):
    """View account"""
    return render(request, 'accounts/index.html', {
        'account': request.user.serialize([
            'username', 'name', 'display_name', 'email', 'created', 'last_seen', 'roles'
        ]),
    })


@csrf_protect
@require_http_methods(["GET", "POST"])
def register(request):
    """Register account"""
    if request.user.is_authenticated:
        messages.info(request, _("You are already logged in."))
        return redirect(LOGGED_IN_ROUTE)

    form = UserForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        user = form.save(commit=False)
        user.creator_id = user.id
        user.owner_id = user.id
        UserRepository(logger=logger).save(user)

        logger.info(f"Account created: {user.username} from {get_client_ip(request)}")

        auth_login(request, user, backend=AUTHENTICATION_BACKEND)
        messages.success(request, _("Your account has been registered."))
        return redirect(get_success_url(request))

    return render(request, 'accounts/register.html', {'form': form})


@login_required
@csrf_protect
@require_http_methods(["GET", "POST"])
def edit(request):
    """Edit account"""
    user = request.user
    form = UserForm(request.POST or None, instance=user)

    if request.method == 'POST':
        if form.is_valid():
            password_changed = bool(form.cleaned_data.get('password1'))
            UserRepository(logger=logger).save(form.save(commit=False))

            if password_changed:
                update_session_auth_hash(request, user)

            logger.info(f"Account updated: {user.username} from {get_client_ip(request)}")

            messages.success(request, _("Your account has been updated."))
            return redirect(LOGGED_IN_ROUTE)

        logger.warning(
            f"Account update failed: {user.username} from {get_client_ip(request)}"
            f" ({', '.join(form.errors)})"
        )

    return render(request, 'accounts/edit.html', {'form': form, 'user': user})


@never_cache
@csrf_protect
@require_http_methods(["GET", "POST"])
def login(request):
    """Login with username or email"""
    if request.user.is_authenticated:
        messages.info(request, _("You are already logged in."))
        return redirect(LOGGED_IN_ROUTE)

    if request.method == 'POST':
        request.session[LAST_USERNAME_SESSION_KEY] = request.POST.get('username', '')
        form = LoginForm(request, data=request.POST)

        if form.is_valid():
            auth_login(request, form.get_user())
            return redirect(get_success_url(request))
    else:
        form = LoginForm(request, initial={
            'username': request.session.get(LAST_USERNAME_SESSION_KEY, ''),
        })

    return render(request, 'accounts/login.html', {
        'form': form,
        'last_username': request.session.get(LAST_USERNAME_SESSION_KEY, ''),
        'error': next(iter(form.non_field_errors()), None),
    })


@require_http_methods(["GET", "POST"])
def logout(request):
    """Logout"""
    if not request.user.is_authenticated:
        messages.info(request, _("You are not logged in."))
        return redirect(LOGIN_ROUTE)

    auth_logout(request)
    return redirect(LOGGED_OUT_ROUTE)
