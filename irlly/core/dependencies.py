"""
Core dependencies for identity and event access
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from irlly.core.access import AccessEvaluator, CircleMembershipResolver
from irlly.database.supabase_client import get_supabase
from irlly.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (member and owned circle ids)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_access_cache(request: Request) -> Dict[str, Any]:
    return _get_request_cache(request)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to the authenticated user"""
    return auth_service.get_current_user(credentials.credentials)


def get_current_user_id(user_data: dict = Depends(get_current_user)) -> str:
    return user_data["id"]


def get_circle_resolver(
    supabase: Client = Depends(get_supabase),
    cache: Dict[str, Any] = Depends(get_access_cache)
) -> CircleMembershipResolver:
    return CircleMembershipResolver(supabase, cache)


def get_access_evaluator(
    supabase: Client = Depends(get_supabase),
    resolver: CircleMembershipResolver = Depends(get_circle_resolver)
) -> AccessEvaluator:
    return AccessEvaluator(supabase, resolver)
