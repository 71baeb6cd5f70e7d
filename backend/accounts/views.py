import json
from django.contrib.auth import authenticate
from django.contrib.auth.hashers import make_password
from django.views.decorators.csrf import csrf_exempt
from django.http import JsonResponse
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from .models import CustomUser
from .permissions import Action, Role


def _error(detail: str, status_code: int):
    """Consistent error payload shape across API: {'detail': ...}."""
    return JsonResponse({'detail': detail}, status=status_code)


def _read_body(request):
    """Parse the JSON body; returns (data, error_response)."""
    try:
        data = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return None, _error('Invalid JSON', 400)
    if not isinstance(data, dict):
        return None, _error('Expected a JSON object', 400)
    if not data.get('username') or not data.get('password'):
        return None, _error('Username and password required', 400)
    return data, None


def _token_payload(user, token):
    return {
        'token': token.key,
        'role': user.role,
        'username': user.username,
    }


@csrf_exempt
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login endpoint that returns a token and the user's role
    """
    data, error = _read_body(request)
    if error:
        return error

    user = authenticate(username=data['username'], password=data['password'])
    if not user:
        return _error('Invalid credentials', 401)

    token, _ = Token.objects.get_or_create(user=user)
    return JsonResponse(_token_payload(user, token))


@csrf_exempt
@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    """
    Registration endpoint; new users are Reviewers unless a role is given
    """
    data, error = _read_body(request)
    if error:
        return error

    role = data.get('role') or Role.REVIEWER
    valid_roles = [choice for choice, _ in CustomUser.ROLE_CHOICES]
    if role not in valid_roles:
        return _error(f"Unknown role '{role}'. Use one of: {', '.join(valid_roles)}", 400)

    if CustomUser.objects.filter(username=data['username']).exists():
        return _error('Username already exists', 400)

    user = CustomUser.objects.create(
        username=data['username'],
        email=data.get('email', ''),
        password=make_password(data['password']),
        role=role,
    )
    token = Token.objects.create(user=user)
    return JsonResponse(_token_payload(user, token), status=201)


@api_view(['GET'])
def me_view(request):
    """
    The signed-in user with the actions their role allows (drives navigation)
    """
    user = request.user
    return JsonResponse({
        'username': user.username,
        'role': user.effective_role,
        'actions': [action for action in Action.ALL if user.can(action)],
    })
