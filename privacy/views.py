"""
Views for the GDPR admin pages.

Two pages (settings and requests) plus three POST-only actions on the
erasure queue. The actions verify a per-action token, report their
outcome through the messages framework and redirect back to the
requests page.
"""

import logging
from functools import wraps
from urllib.parse import urlsplit, urlunsplit

from django.contrib import admin, messages
from django.contrib.admin.views.decorators import staff_member_required
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.translation import gettext as _
from django.views.decorators.http import require_POST

from core.logging.structured import log_business_event, log_security_event
from core.nonces import create_token, verify_token
from core.utils import add_query_arg, get_referer, sanitize_text_field

from .constants import (
    ACTION_DELETE_USER,
    ACTION_EMAIL_LOOKUP,
    DELETE_TAB_FRAGMENT,
    REQUEST_DELETE,
    TOKEN_FIELD_DELETE_USER,
    TOKEN_FIELD_EMAIL_LOOKUP,
    TOKEN_FIELD_REMOVE_USER,
    USER_EMAIL_FIELD,
)
from .exceptions import GDPRRequestError, InvalidSecurityToken
from .forms import CookieSettingsForm, UserEmailForm
from .registration import COOKIE_SECTION, DEFAULT_TAB, get_settings_tabs
from .services import RequestQueueService, get_user_by_email, user_has_content

logger = logging.getLogger(__name__)


def _requests_redirect(request):
    """
    Redirect back to the erasure tab of the page that submitted the form.

    Off-host referers fall back to the requests page.
    """
    target = get_referer(request, reverse('privacy:requests'))
    parts = urlsplit(target)
    target = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ''))
    target = add_query_arg(target, {'settings-updated': True})
    return redirect(f'{target}#{DELETE_TAB_FRAGMENT}')


def request_action(token_field, action):
    """
    Decorator for the erasure queue actions.

    Rejects the request with a 403 error page when the token or the email
    is missing or the token does not verify. Otherwise the view receives the
    sanitized email; GDPRRequestError raised by the view becomes an error
    message and every outcome redirects back to the requests page.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            token = request.POST.get(token_field)
            if token is None or USER_EMAIL_FIELD not in request.POST or not verify_token(request, token, action):
                log_security_event(
                    'invalid_security_token',
                    request,
                    details={'action': action, 'token_field': token_field},
                )
                error = InvalidSecurityToken()
                return render(
                    request,
                    'privacy/admin/error.html',
                    {
                        **admin.site.each_context(request),
                        'title': _('Security check failed'),
                        'message': error.message,
                    },
                    status=403,
                )

            form = UserEmailForm(request.POST)
            form.is_valid()
            email = form.cleaned_data.get(USER_EMAIL_FIELD, '')

            try:
                view_func(request, email, *args, **kwargs)
            except GDPRRequestError as exc:
                logger.info("Request action %s failed: %s", view_func.__name__, exc.code)
                messages.error(request, exc.message, extra_tags=exc.code)

            return _requests_redirect(request)
        return _wrapped
    return decorator


@staff_member_required
def settings_page(request):
    """Cookie settings page."""
    tabs = get_settings_tabs()
    current_tab = sanitize_text_field(request.GET.get('tab', DEFAULT_TAB)) or DEFAULT_TAB

    if request.method == 'POST':
        form = CookieSettingsForm(request.POST)
        if form.is_valid():
            report = form.save()
            messages.success(request, _('Settings saved.'), extra_tags='settings_updated')
            if report.has_drops:
                messages.warning(
                    request,
                    _('Some cookie categories or hosts were incomplete and were not saved.'),
                    extra_tags='incomplete-cookies',
                )
            log_business_event(
                'gdpr_settings_updated',
                user=request.user,
                details={
                    'dropped_categories': len(report.dropped_categories),
                    'dropped_hosts': len(report.dropped_hosts),
                },
            )
            target = add_query_arg(reverse('privacy:settings'), {'tab': current_tab, 'settings-updated': True})
            return redirect(target)
    else:
        form = CookieSettingsForm()

    context = {
        **admin.site.each_context(request),
        'title': _('GDPR'),
        'tabs': tabs,
        'current_tab': current_tab,
        'section': COOKIE_SECTION,
        'form': form,
        'cookie_tabs': CookieSettingsForm.cookie_tabs(),
    }
    return render(request, 'privacy/admin/settings.html', context)


@staff_member_required
def requests_page(request):
    """Data subject requests page, one tab per request type."""
    requests = RequestQueueService.get_requests()
    groups = RequestQueueService.group_requests(requests)
    tabs = RequestQueueService.request_tabs(groups)

    delete_rows = []
    for entry in groups[REQUEST_DELETE]:
        user = get_user_by_email(entry.get('email'))
        delete_rows.append({
            'request': entry,
            'user_exists': user is not None,
            'has_content': user_has_content(user) if user is not None else None,
        })

    context = {
        **admin.site.each_context(request),
        'title': _('Requests'),
        'tabs': tabs,
        'groups': groups,
        'delete_rows': delete_rows,
        'email_field': USER_EMAIL_FIELD,
        'email_lookup_field': TOKEN_FIELD_EMAIL_LOOKUP,
        'email_lookup_token': create_token(request, ACTION_EMAIL_LOOKUP),
        'remove_user_field': TOKEN_FIELD_REMOVE_USER,
        'delete_user_field': TOKEN_FIELD_DELETE_USER,
        'delete_user_token': create_token(request, ACTION_DELETE_USER),
    }
    return render(request, 'privacy/admin/requests.html', context)


@staff_member_required
@require_POST
@request_action(TOKEN_FIELD_EMAIL_LOOKUP, ACTION_EMAIL_LOOKUP)
def add_to_deletion_requests(request, email):
    RequestQueueService.add_deletion_request(email)
    log_business_event('deletion_request_added', user=request.user)
    messages.success(
        request,
        _('User %(email)s was added to the deletion table.') % {'email': email},
        extra_tags='new-request',
    )


@staff_member_required
@require_POST
@request_action(TOKEN_FIELD_REMOVE_USER, ACTION_DELETE_USER)
def remove_from_deletion_requests(request, email):
    RequestQueueService.remove_deletion_request(email)
    log_business_event('deletion_request_removed', user=request.user)
    messages.success(
        request,
        _('User %(email)s was removed from the deletion table.') % {'email': email},
        extra_tags='remove-request',
    )


@staff_member_required
@require_POST
@request_action(TOKEN_FIELD_DELETE_USER, ACTION_DELETE_USER)
def process_user_deletion(request, email):
    RequestQueueService.process_user_deletion(email)
    log_business_event('user_erased', user=request.user)
    messages.success(
        request,
        _('User %(email)s was deleted from the site.') % {'email': email},
        extra_tags='user-deleted',
    )
