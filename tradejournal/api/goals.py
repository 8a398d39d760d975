"""Goals API."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, col, select

from tradejournal.database import get_session
from tradejournal.models.goal import Goal
from tradejournal.models.user import User
from tradejournal.schemas.goal import GoalCreate, GoalRead, GoalStats, GoalStatusUpdate, GoalUpdate
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/goals", tags=["goals"])


def _get_owned(session: Session, goal_id: int, user: User) -> Goal:
    goal = session.get(Goal, goal_id)
    if not goal or goal.user_id != user.id:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


def _save(session: Session, goal: Goal) -> Goal:
    goal.updated_at = datetime.now(timezone.utc)
    session.add(goal)
    session.commit()
    session.refresh(goal)
    return goal


@router.get("", response_model=list[GoalRead])
def list_goals(
    status: str | None = None,
    category: str | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Goal).where(Goal.user_id == user.id).order_by(col(Goal.created_at).desc())
    if status is not None:
        stmt = stmt.where(Goal.status == status.upper())
    if category is not None:
        stmt = stmt.where(Goal.category == category.upper())
    return session.exec(stmt).all()


@router.post("", response_model=GoalRead, status_code=201)
def create_goal(
    data: GoalCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    goal = Goal(**data.model_dump(), user_id=user.id)
    session.add(goal)
    session.commit()
    session.refresh(goal)
    return goal


@router.get("/stats", response_model=GoalStats)
def goal_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    goals = session.exec(select(Goal).where(Goal.user_id == user.id)).all()
    completed = sum(1 for g in goals if g.status == "COMPLETED")
    return GoalStats(
        total=len(goals),
        completed=completed,
        in_progress=sum(1 for g in goals if g.status == "IN_PROGRESS"),
        completion_rate=completed / len(goals) * 100 if goals else 0.0,
    )


@router.get("/{goal_id}", response_model=GoalRead)
def get_goal(
    goal_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _get_owned(session, goal_id, user)


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(
    goal_id: int,
    data: GoalUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    goal = _get_owned(session, goal_id, user)
    update_data = data.model_dump(exclude_unset=True)

    try:
        GoalCreate.model_validate({**goal.model_dump(), **update_data})
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    for key, value in update_data.items():
        setattr(goal, key, value)
    return _save(session, goal)


@router.patch("/{goal_id}/status", response_model=GoalRead)
def update_goal_status(
    goal_id: int,
    data: GoalStatusUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    goal = _get_owned(session, goal_id, user)
    goal.status = data.status
    return _save(session, goal)


@router.delete("/{goal_id}", status_code=204)
def delete_goal(
    goal_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    goal = _get_owned(session, goal_id, user)
    session.delete(goal)
    session.commit()
