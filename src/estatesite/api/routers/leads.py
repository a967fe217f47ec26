"""
Guide Leads Router

Endpoints for the downloadable-guide pop-ups ("blunders" and "strategies").
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import GuideLeadCreate, GuideLeadListResponse, GuideLeadResponse
from src.estatesite.db.models import Admin, GuideLead, GuideType
from src.estatesite.db.repository import GuideLeadRepository, newest_first
from src.estatesite.query.pagination import LEAD_PAGE_SIZE, paginate, parse_page_request
from src.estatesite.query.projection import guide_lead_view
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/leads", tags=["leads"])

repository = GuideLeadRepository()


@router.post("/{guide}/submit", response_model=GuideLeadResponse, status_code=status.HTTP_201_CREATED)
def submit_lead(guide: GuideType, payload: GuideLeadCreate, db: Session = Depends(get_db)):
    """Capture the e-mail (and optional name) of a guide download."""
    lead = repository.create(db, guide=guide.value, name=payload.name, email=payload.email)
    db.commit()

    logger.info("guide_lead_submitted", id=lead.id, guide=lead.guide)
    return {"success": True, "message": "Lead submitted successfully", "lead": guide_lead_view(lead)}


@router.get("/{guide}/all", response_model=GuideLeadListResponse)
def list_leads(
    guide: GuideType,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Paginated leads of one guide, newest first."""
    page_request = parse_page_request({"page": page, "limit": limit}, LEAD_PAGE_SIZE, settings.max_page_limit)
    result = paginate(
        db,
        GuideLead,
        GuideLead.guide == guide.value,
        page_request,
        order_by=newest_first(GuideLead),
    )
    return {
        "success": True,
        "leads": [guide_lead_view(lead) for lead in result.items],
        "pagination": result.pagination.to_dict(),
    }
