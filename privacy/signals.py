"""
Extension points of the GDPR admin.

Other apps connect receivers to these signals instead of patching the
admin views.
"""

from django.dispatch import Signal

# Sent while building the settings page tabs. Receivers return a mapping
# of extra tabs, e.g. {'consents': {'name': 'Consents', 'page': 'gdpr-consents'}}.
settings_tabs = Signal()

# Sent with ``user`` when checking whether an account owns content.
# A truthy return value from any receiver counts as content.
has_user_content = Signal()

# Sent with ``user`` right before the account is erased so receivers can
# purge related data.
pre_user_erasure = Signal()
