"""
Authentication views.

Login issues both a DRF token and a JWT pair for the account bound to a
ledger wallet.  The response reports which ledger roles the wallet
currently holds so the front-end can pick its landing page; the roles
are informational only, every ledger operation re-checks its guards.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ledger.guards import is_administrator, is_registered_doctor, is_registered_patient
from ledger.serializers.auth import LoginSerializer

from .models import User

logger = logging.getLogger(__name__)


def ledger_roles(wallet: str | None) -> list[str]:
    roles = []
    if is_administrator(wallet):
        roles.append('administrator')
    if is_registered_doctor(wallet):
        roles.append('doctor')
    if is_registered_patient(wallet):
        roles.append('patient')
    return roles


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login with username or wallet plus password.
    Accepts fields:
      - account (username or wallet) or username
      - password
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    account = s.validated_data['account']
    password = s.validated_data['password']

    username = account
    bound = User.objects.filter(wallet=account).only('username').first()
    if bound is not None:
        username = bound.username

    user = authenticate(request, username=username, password=password)
    if not user:
        logger.warning('login failed for %s from %s', account, request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'detail': 'invalid account or password'}, status=400)

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    logger.info('login ok user=%s wallet=%s', user.id, user.wallet or '-')

    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'user': {
            'id': user.id,
            'username': user.username,
            'wallet': user.wallet,
            'roles': ledger_roles(user.wallet),
        },
    }, status=200)

# ScopedRateThrottle reads throttle_scope from the wrapped APIView class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist current user's refresh tokens (all or a given one)."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'ok': True, 'blacklisted': count})
