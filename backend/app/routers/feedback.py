from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_optional_user, require_site_admin
from app.models.form import Feedback
from app.models.profile import Profile
from app.schemas.form import FeedbackCreate, FeedbackResponse

router = APIRouter()


@router.post("", status_code=201, response_model=FeedbackResponse)
async def submit_feedback(
    req: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_user),
):
    feedback = Feedback(
        user_id=user.id if user else None,
        feedback_type=req.feedback_type,
        rating=req.rating,
        content=req.content.strip(),
        page_url=req.page_url,
    )
    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)
    return FeedbackResponse.model_validate(feedback)


@router.get("", response_model=list[FeedbackResponse])
async def list_feedback(
    feedback_type: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    admin: Profile = Depends(require_site_admin),
):
    query = select(Feedback)
    if feedback_type:
        query = query.where(Feedback.feedback_type == feedback_type)
    result = await db.execute(query.order_by(Feedback.created_at.desc()).limit(limit))
    return [FeedbackResponse.model_validate(f) for f in result.scalars().all()]
