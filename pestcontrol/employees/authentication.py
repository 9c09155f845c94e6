"""
Token authentication for the employee portal.

Portal tokens are ordinary simplejwt access tokens that carry an
``employee_id`` claim instead of a user id, so admin endpoints (which use
the stock JWTAuthentication) reject them and portal endpoints reject admin
tokens.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.tokens import AccessToken
from .models import Employee

EMPLOYEE_CLAIM = 'employee_id'


def issue_employee_token(employee):
    token = AccessToken()
    token[EMPLOYEE_CLAIM] = employee.pk
    token['employee_code'] = employee.employee_id
    return str(token)


class EmployeeJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        try:
            employee_pk = validated_token[EMPLOYEE_CLAIM]
        except KeyError:
            raise InvalidToken('Token is not an employee portal token.')

        try:
            return Employee.objects.get(pk=employee_pk, is_active=True)
        except Employee.DoesNotExist:
            raise AuthenticationFailed('Employee not found or inactive.', code='employee_not_found')
