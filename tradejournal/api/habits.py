"""Habits API: daily routines and their check-offs."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, col, select

from tradejournal.database import get_session
from tradejournal.models.habit import Habit, HabitLog
from tradejournal.models.user import User
from tradejournal.schemas.habit import HabitCreate, HabitLogRead, HabitLogUpsert, HabitRead, HabitStats
from tradejournal.services.periods import resolve_timezone
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/habits", tags=["habits"])


def _get_owned(session: Session, habit_id: int, user: User) -> Habit:
    habit = session.get(Habit, habit_id)
    if not habit or habit.user_id != user.id:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit


@router.get("", response_model=list[HabitRead])
def list_habits(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Habit).where(Habit.user_id == user.id).order_by(Habit.created_at)
    return session.exec(stmt).all()


@router.post("", response_model=HabitRead, status_code=201)
def create_habit(
    data: HabitCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    habit = Habit(**data.model_dump(), user_id=user.id)
    session.add(habit)
    session.commit()
    session.refresh(habit)
    return habit


@router.get("/stats", response_model=HabitStats)
def habit_stats(
    day: date | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Completion rate for one day (today in the user's timezone by default)."""
    day = day or datetime.now(resolve_timezone(user.timezone)).date()
    habits = session.exec(select(Habit).where(Habit.user_id == user.id)).all()
    habit_ids = [h.id for h in habits]

    completed = 0
    if habit_ids:
        logs = session.exec(
            select(HabitLog).where(col(HabitLog.habit_id).in_(habit_ids), HabitLog.date == day)
        ).all()
        completed = sum(1 for log in logs if log.completed)

    return HabitStats(
        date=day,
        total_habits=len(habits),
        completed=completed,
        completion_rate=completed / len(habits) * 100 if habits else 0.0,
    )


@router.get("/{habit_id}/logs", response_model=list[HabitLogRead])
def list_habit_logs(
    habit_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    _get_owned(session, habit_id, user)
    stmt = select(HabitLog).where(HabitLog.habit_id == habit_id).order_by(col(HabitLog.date).desc())
    return session.exec(stmt).all()


@router.put("/{habit_id}/logs", response_model=HabitLogRead)
def upsert_habit_log(
    habit_id: int,
    data: HabitLogUpsert,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Record whether the habit was done on a day; one log per habit and day."""
    _get_owned(session, habit_id, user)
    log = session.exec(
        select(HabitLog).where(HabitLog.habit_id == habit_id, HabitLog.date == data.date)
    ).first()
    if log is None:
        log = HabitLog(habit_id=habit_id, date=data.date, completed=data.completed)
    else:
        log.completed = data.completed

    session.add(log)
    session.commit()
    session.refresh(log)
    return log


@router.delete("/{habit_id}", status_code=204)
def delete_habit(
    habit_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    habit = _get_owned(session, habit_id, user)
    for log in session.exec(select(HabitLog).where(HabitLog.habit_id == habit_id)).all():
        session.delete(log)
    session.delete(habit)
    session.commit()
