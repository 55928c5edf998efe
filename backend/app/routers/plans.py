"""Public plan API"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.plan import Plan

router = APIRouter(prefix="/api/plans", tags=["plans"])


@router.get("")
async def list_public_plans(db: Session = Depends(get_db)):
    """Active plans in display order"""
    plans = db.query(Plan).filter(Plan.is_active == True).order_by(Plan.sort_order.asc(), Plan.id.asc()).all()
    return [
        {
            "slug": p.slug,
            "name": p.name,
            "description": p.description,
            "price": p.price,
            "currency": p.currency,
            "billing_cycle": p.billing_cycle,
        }
        for p in plans
    ]
