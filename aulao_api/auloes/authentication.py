from rest_framework.permissions import BasePermission
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import RefreshToken


class AdminPrincipal:
    """Request-scoped administrator session rebuilt from the token claims."""

    is_authenticated = True

    def __init__(self, admin_id, username):
        self.admin_id = admin_id
        self.username = username

    def __str__(self):
        return self.username or ''


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return bool(request.auth and request.auth.get("role") == "admin")


class AdminJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        return AdminPrincipal(
            admin_id=validated_token.get("admin_id"),
            username=validated_token.get("username"),
        )

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None
        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None
        validated_token = self.get_validated_token(raw_token)
        return (self.get_user(validated_token), validated_token)


def issue_admin_tokens(account):
    payload = {
        'admin_id': str(account.id),
        'username': account.username,
        'role': 'admin',
    }

    refresh = RefreshToken()
    for k, v in payload.items():
        refresh[k] = v

    access = refresh.access_token
    for k, v in payload.items():
        access[k] = v

    return str(refresh), str(access)
