"""
Serializers for the read-only GDPR admin API.
"""

from rest_framework import serializers


class DataRequestSerializer(serializers.Serializer):
    """A single queued data subject request."""
    email = serializers.EmailField()
    date = serializers.CharField()
    type = serializers.CharField()
    data = serializers.CharField(required=False)


class RequestTabSerializer(serializers.Serializer):
    name = serializers.CharField()
    count = serializers.IntegerField(min_value=0)


class RequestQueueSerializer(serializers.Serializer):
    """Tab counts plus the requests grouped by type."""
    tabs = serializers.DictField(child=RequestTabSerializer())
    requests = serializers.DictField(child=DataRequestSerializer(many=True))


class CookieHostSerializer(serializers.Serializer):
    name = serializers.CharField()
    cookies_used = serializers.CharField()
    optout = serializers.CharField(allow_blank=True)


class CookieCategorySerializer(serializers.Serializer):
    name = serializers.CharField()
    always_active = serializers.CharField(allow_blank=True)
    how_we_use = serializers.CharField()
    cookies_used = serializers.CharField()
    hosts = serializers.DictField(child=CookieHostSerializer())


class CookieSettingsSerializer(serializers.Serializer):
    """Stored cookie banner settings."""
    gdpr_cookie_banner_content = serializers.CharField(allow_blank=True)
    gdpr_cookie_privacy_excerpt = serializers.CharField(allow_blank=True)
    gdpr_cookie_popup_content = serializers.DictField(child=CookieCategorySerializer())
