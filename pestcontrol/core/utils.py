"""Activity logging, code generation and display-settings helpers"""
import logging
import re

from django.conf import settings

from .models import Activity, Setting

logger = logging.getLogger(__name__)


def record_activity(activity_type, description):
    """
    Append an activity entry and drop everything older than the newest
    PESTCONTROL_ACTIVITY_LIMIT entries.

    Activity is display-only, so a failure here is logged and never breaks
    the operation that triggered it.
    """
    try:
        activity = Activity.objects.create(type=activity_type, description=description)
        limit = settings.PESTCONTROL_ACTIVITY_LIMIT
        stale_ids = list(
            Activity.objects.order_by('-created_at', '-id').values_list('id', flat=True)[limit:]
        )
        if stale_ids:
            Activity.objects.filter(id__in=stale_ids).delete()
        return activity
    except Exception as e:
        logger.error(f"Failed to record activity ({activity_type}): {str(e)}")
        return None


def next_sequential_code(queryset, field, prefix, width=4):
    """
    Next code in a PREFIX0001-style sequence: highest numeric suffix + 1.

    Values that do not parse are ignored, so a hand-typed "EMP-X" never
    breaks generation.
    """
    pattern = re.compile(rf'^{re.escape(prefix)}(\d+)$')
    highest = 0
    for value in queryset.values_list(field, flat=True):
        match = pattern.match(value or '')
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}{str(highest + 1).zfill(width)}"


def get_display_settings():
    """Display settings stored as Setting rows, merged over the defaults"""
    values = dict(settings.PESTCONTROL_DISPLAY_DEFAULTS)
    stored = Setting.objects.filter(key__in=values.keys())
    for setting in stored:
        values[setting.key] = setting.value or None
    return values


def save_display_settings(data):
    for key in settings.PESTCONTROL_DISPLAY_DEFAULTS:
        if key in data:
            value = data[key]
            Setting.objects.update_or_create(
                key=key,
                defaults={'value': '' if value is None else str(value)},
            )
    return get_display_settings()


def format_quantity(quantity):
    """Decimal quantity without trailing zeros or exponent: 20.000 -> '20'"""
    return format(quantity.normalize(), 'f')
