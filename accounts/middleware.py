from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .repositories import UserRepository


class LastSeenMiddleware:
    """
    Record when an authenticated user was last active.
    Writes at most once per LAST_SEEN_INTERVAL seconds per user.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.interval = timedelta(seconds=getattr(settings, 'LAST_SEEN_INTERVAL', 300))
        self.repository = UserRepository()

    def __call__(self, request):
        response = self.get_response(request)

        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            now = timezone.now()
            last_seen = user.time_stamp_last_seen
            if last_seen is None or now - last_seen >= self.interval:
                self.repository.touch_last_seen(user, now)

        return response
