"""Format checks for employee identity and contact fields"""
import re

from rest_framework import serializers

AADHAAR_RE = re.compile(r'^\d{12}$')
MOBILE_RE = re.compile(r'^\d{10}$')


def only_digits(value):
    """Drop spaces, hyphens and other separators users type into numbers"""
    return re.sub(r'\D', '', value or '')


def validate_aadhaar(value):
    digits = only_digits(value)
    if digits and not AADHAAR_RE.match(digits):
        raise serializers.ValidationError('Aadhaar number must be exactly 12 digits.')
    return digits


def validate_mobile(value):
    digits = only_digits(value)
    if digits and not MOBILE_RE.match(digits):
        raise serializers.ValidationError('Mobile number must be exactly 10 digits.')
    return digits
