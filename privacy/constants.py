"""
Option keys, request types and form token names used by the GDPR admin.
"""

from django.utils.translation import gettext_lazy as _

# === Stored options ===
OPTION_BANNER_CONTENT = 'gdpr_cookie_banner_content'
OPTION_PRIVACY_EXCERPT = 'gdpr_cookie_privacy_excerpt'
OPTION_POPUP_CONTENT = 'gdpr_cookie_popup_content'
OPTION_REQUESTS = 'gdpr_requests'

# === Settings API ===
SETTINGS_GROUP = 'gdpr'
SETTINGS_PAGE = 'gdpr-settings'

# === Data subject requests ===
REQUEST_ACCESS = 'access'
REQUEST_RECTIFY = 'rectify'
REQUEST_PORTABILITY = 'portability'
REQUEST_COMPLAINT = 'complaint'
REQUEST_DELETE = 'delete'

REQUEST_TYPES = [
    (REQUEST_ACCESS, _('Access Data')),
    (REQUEST_RECTIFY, _('Rectify Data')),
    (REQUEST_PORTABILITY, _('Data Portability')),
    (REQUEST_COMPLAINT, _('Complaint')),
    (REQUEST_DELETE, _('Erasure')),
]
REQUEST_TYPE_LABELS = dict(REQUEST_TYPES)

# === Form security tokens ===
USER_EMAIL_FIELD = 'user_email'

ACTION_EMAIL_LOOKUP = 'gdpr-request-email-lookup'
ACTION_DELETE_USER = 'gdpr-request-delete-user'

TOKEN_FIELD_EMAIL_LOOKUP = 'gdpr_delete_email_lookup'
TOKEN_FIELD_REMOVE_USER = 'gdpr_delete_remove_user'
TOKEN_FIELD_DELETE_USER = 'gdpr_delete_user'

# Fragment of the requests page the erasure actions return to
DELETE_TAB_FRAGMENT = 'delete'
