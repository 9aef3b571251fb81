import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from cycling_profile.config import Settings, get_settings
from cycling_profile.models.strava import Period, ProfileResponse
from cycling_profile.services.stats_service import get_stats_for
from cycling_profile.services.strava_service import StravaAPIError, StravaService
from cycling_profile.utils.auth import ConfigurationError, StravaAuthHelper

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

BEARER_PREFIX = "Bearer "


def get_auth_helper(settings: Settings = Depends(get_settings)) -> StravaAuthHelper:
    return StravaAuthHelper(settings)


def get_strava_service(settings: Settings = Depends(get_settings)) -> StravaService:
    return StravaService(settings)


def _bearer_token(authorization: Optional[str]) -> str:
    """Extract the access token from an Authorization header."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Access token required")
    if not authorization.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    access_token = authorization[len(BEARER_PREFIX):].strip()
    if not access_token:
        raise HTTPException(status_code=401, detail="Access token required")
    return access_token


def _popup_page(request: Request, settings: Settings, title: str, message: str, payload: Dict[str, Any]) -> HTMLResponse:
    """Render the page that hands the OAuth outcome to the opener window and closes."""
    return templates.TemplateResponse(
        request,
        "oauth_callback.html",
        {
            "title": title,
            "message": message,
            "payload": payload,
            "target_origin": settings.frontend_origin
        }
    )


@router.get("/auth/strava", summary="Start Strava OAuth")
async def initiate_auth(auth_helper: StravaAuthHelper = Depends(get_auth_helper)):
    """Redirect the browser to the Strava authorization page."""
    logger.info("Initiating Strava OAuth flow")
    try:
        url = auth_helper.get_authorization_url()
    except ConfigurationError as e:
        logger.error(f"Missing OAuth configuration: {e}")
        raise HTTPException(status_code=500, detail="OAuth configuration missing")

    logger.info("Redirecting to Strava authorization")
    return RedirectResponse(url, status_code=302)


@router.get("/auth/strava/callback", summary="Strava OAuth callback")
async def handle_callback(
    request: Request,
    code: Optional[str] = Query(None, description="Authorization code issued by Strava"),
    error: Optional[str] = Query(None, description="Error reported by Strava"),
    settings: Settings = Depends(get_settings),
    auth_helper: StravaAuthHelper = Depends(get_auth_helper)
):
    """Exchange the authorization code and hand the token to the browser."""
    logger.info("Handling OAuth callback")
    redirect_flow = settings.oauth_flow == "redirect"

    if error or not code:
        reason = error or "Missing authorization code"
        logger.error(f"OAuth callback error: {reason}")
        if redirect_flow:
            raise HTTPException(status_code=400, detail="Authorization failed")
        return _popup_page(
            request, settings, "OAuth Error", "Authorization failed",
            {"error": f"Authorization failed: {reason}"}
        )

    try:
        token = await auth_helper.exchange_code_for_token(code)
    except (ConfigurationError, StravaAPIError) as e:
        logger.error(f"Token exchange failed: {e}")
        if redirect_flow:
            raise HTTPException(status_code=500, detail="Authentication failed")
        return _popup_page(
            request, settings, "OAuth Error", "Authentication failed",
            {"error": "Authentication failed"}
        )

    if redirect_flow:
        query = urlencode({"access_token": token.access_token, "athlete_id": token.athlete.id})
        logger.info("OAuth successful, redirecting to frontend")
        return RedirectResponse(f"{settings.frontend_url.rstrip('/')}/dashboard?{query}", status_code=302)

    logger.info("OAuth successful, sending token to opener window")
    return _popup_page(
        request, settings, "OAuth Success", "Connected to Strava. You can close this window.",
        {"accessToken": token.access_token, "athleteId": str(token.athlete.id)}
    )


@router.get("/api/profile", response_model=ProfileResponse, summary="Get athlete profile and cycling stats")
async def get_athlete_profile(
    period: Optional[str] = Query(None, description="Look-back window in days (7, 30, 60), default 30"),
    authorization: Optional[str] = Header(None),
    strava_service: StravaService = Depends(get_strava_service)
):
    """Get the athlete profile with cycling totals for the selected period."""
    access_token = _bearer_token(authorization)
    selected = Period.from_query(period)
    logger.info(f"Getting athlete profile for period: {selected.value} days")

    try:
        athlete, activities = await strava_service.get_profile_data(access_token)
    except StravaAPIError as e:
        logger.error(f"Failed to get profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch profile data")

    stats = get_stats_for(selected, activities)
    logger.info("Profile data assembled")
    return ProfileResponse(athlete=athlete, stats=stats, period=selected.label)
