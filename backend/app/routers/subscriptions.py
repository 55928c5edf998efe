"""Tracked subscriptions: list / create / detail / update"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.subscription import (
    SubscriptionCreateRequest, SubscriptionUpdateRequest, SubscriptionInfo,
)
from app.services import subscription_service
from app.routers.deps import require_user_id

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


@router.get("", response_model=list[SubscriptionInfo])
async def list_subscriptions(
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return subscription_service.list_subscriptions(db, user_id)


@router.post("", response_model=SubscriptionInfo, status_code=201)
async def create_subscription(
    req: SubscriptionCreateRequest,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Create; next billing date is derived from the start date unless given"""
    return subscription_service.create_subscription(db, user_id, req.model_dump())


@router.get("/{subscription_id}", response_model=SubscriptionInfo)
async def get_subscription(
    subscription_id: int,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    sub = subscription_service.get_subscription(db, user_id, subscription_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return sub


@router.patch("/{subscription_id}", response_model=SubscriptionInfo)
async def update_subscription(
    subscription_id: int,
    req: SubscriptionUpdateRequest,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    sub = subscription_service.get_subscription(db, user_id, subscription_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription_service.update_subscription(db, sub, req.model_dump(exclude_unset=True))
