# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + media host reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "media_host": "not_configured",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Uploads degrade silently, so an unreachable media host only marks us degraded
    if settings.MEDIA_CONFIGURED:
        try:
            resp = requests.head(settings.IMAGEKIT_URL_ENDPOINT, timeout=3)
            result["media_host"] = "ok" if resp.status_code < 500 else f"http_{resp.status_code}"
        except requests.exceptions.ConnectionError:
            result["media_host"] = "unreachable"
            result["status"] = "degraded"
        except Exception as e:
            result["media_host"] = f"error: {str(e)}"
            result["status"] = "degraded"

    return result
