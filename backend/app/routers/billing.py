"""Plan change: cost preview and confirmation"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.billing import PlanChangeRequest, ProrationPreviewResponse, PlanChangeResponse
from app.services import plan_change_service
from app.services.proration_service import IneligibleUpgrade, UpgradeType
from app.routers.deps import require_user_id

router = APIRouter(prefix="/api/billing", tags=["billing"])


def _get_target_plan(db: Session, slug: str):
    plan = plan_change_service.get_purchasable_plan(db, slug)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


@router.post("/preview", response_model=ProrationPreviewResponse)
async def preview_plan_change(
    req: PlanChangeRequest,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Advisory estimate; the payment provider's figure at checkout is final"""
    plan = _get_target_plan(db, req.plan_slug)
    preview = plan_change_service.preview_plan_change(db, user_id, plan)
    if isinstance(preview, IneligibleUpgrade):
        raise HTTPException(status_code=400, detail=preview.reason)

    return ProrationPreviewResponse(
        plan_slug=plan.slug,
        plan_name=plan.name,
        upgrade_type=preview.upgrade_type.value,
        credit_cents=preview.credit_cents,
        amount_due_cents=preview.amount_due_cents,
        days_remaining=preview.days_remaining,
        is_estimate=preview.is_estimate,
    )


@router.post("/change", response_model=PlanChangeResponse)
async def confirm_plan_change(
    req: PlanChangeRequest,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Decide how the payment provider should carry out the change.

    No amount is returned: the provider prorates and charges on its side.
    """
    plan = _get_target_plan(db, req.plan_slug)
    outcome = plan_change_service.confirm_plan_change(db, user_id, plan)
    if isinstance(outcome, IneligibleUpgrade):
        raise HTTPException(status_code=400, detail=outcome.reason)

    upgrade_type, action = outcome
    return PlanChangeResponse(
        plan_slug=plan.slug,
        upgrade_type=upgrade_type.value,
        provider_action=action,
        cancels_current=upgrade_type is UpgradeType.IMMEDIATE_CHARGE,
    )
