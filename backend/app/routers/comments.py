import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import COMMENTABLE_TYPES
from app.database import get_db
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.models.social import Comment
from app.schemas.social import CommentCreate, CommentResponse

router = APIRouter()


def _comment_out(comment: Comment, author: Profile | None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content_type=comment.content_type,
        content_id=comment.content_id,
        user_id=comment.user_id,
        body=comment.body,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author_name=author.display_name if author else None,
    )


async def _get_comment(db: AsyncSession, comment_id: uuid.UUID) -> Comment:
    comment = await db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.get("/{content_type}/{content_id}", response_model=list[CommentResponse])
async def list_comments(
    content_type: str,
    content_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    if content_type not in COMMENTABLE_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported content type")
    result = await db.execute(
        select(Comment, Profile)
        .join(Profile, Profile.id == Comment.user_id)
        .where(Comment.content_type == content_type, Comment.content_id == content_id)
        .order_by(Comment.created_at)
        .limit(limit)
    )
    return [_comment_out(c, p) for c, p in result.all()]


@router.post("/{content_type}/{content_id}", status_code=201, response_model=CommentResponse)
async def add_comment(
    content_type: str,
    content_id: uuid.UUID,
    req: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    if content_type not in COMMENTABLE_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported content type")
    body = req.body.strip()
    if not body:
        raise HTTPException(status_code=400, detail="Comment cannot be empty")

    comment = Comment(content_type=content_type, content_id=content_id, user_id=user.id, body=body)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return _comment_out(comment, user)


@router.patch("/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: uuid.UUID,
    req: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    comment = await _get_comment(db, comment_id)
    if comment.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only edit your own comments")
    body = req.body.strip()
    if not body:
        raise HTTPException(status_code=400, detail="Comment cannot be empty")

    comment.body = body
    await db.commit()
    await db.refresh(comment)
    return _comment_out(comment, user)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    comment = await _get_comment(db, comment_id)
    if comment.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="You can only delete your own comments")
    await db.delete(comment)
    await db.commit()
    return {"success": True}
