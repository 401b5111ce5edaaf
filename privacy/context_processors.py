from django.urls import reverse
from django.utils.translation import gettext_lazy as _


def gdpr_menu(request):
    """GDPR menu entries for the admin templates; staff only."""
    user = getattr(request, 'user', None)
    if user is None or not (user.is_active and user.is_staff):
        return {}

    return {
        'gdpr_menu': [
            {'title': _('Settings'), 'url': reverse('privacy:settings')},
            {'title': _('Requests'), 'url': reverse('privacy:requests')},
        ]
    }
