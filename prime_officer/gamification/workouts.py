"""
Workout Routine Tracking

A daily non-negotiable tracked beside the mission system. Workouts never
award XP; they keep their own completion log and streak.
"""

from typing import Optional
import logging

from prime_officer.models.user import User
from prime_officer.models.workout import Exercise, WorkoutCompletion, WorkoutDay, WorkoutRoutine
from prime_officer.utils.datetime_helpers import add_days, safe_parse_iso_date

logger = logging.getLogger(__name__)


def _day(day_id: str, label: str, *exercises) -> WorkoutDay:
    return WorkoutDay(
        id=day_id,
        label=label,
        exercises=[Exercise(name=name, sets=sets, reps=reps) for name, sets, reps in exercises],
    )


def get_default_routine() -> WorkoutRoutine:
    """The default 5-day strength split"""
    return WorkoutRoutine(
        name="5-Day Strength Split",
        days=[
            _day(
                "day1", "Day 1: Legs",
                ("Squat", 4, 10),
                ("Machine Hack Squat", 3, 12),
                ("Stiff Legged Deadlift", 4, 10),
                ("Leg Curl", 3, 12),
                ("Dumbbell Lunge", 3, 8),
                ("Leg Press Calf Raises", 3, 12),
                ("Seated Calf Raises", 3, 12),
            ),
            _day(
                "day2", "Day 2: Chest & Biceps",
                ("Bench Press", 4, 10),
                ("Incline Bench Press", 3, 12),
                ("Cable Crossover", 3, 12),
                ("Hammer Strength Chest Press", 3, 8),
                ("Barbell Bicep Curl", 4, 10),
                ("Rope Cable Hammer Curl", 3, 12),
                ("Preacher Curl", 3, 10),
            ),
            _day(
                "day3", "Day 3: Back",
                ("Deadlift", 4, 10),
                ("Barbell Row", 3, 12),
                ("Lat Pulldown", 5, 8),
                ("Cable Row", 3, 12),
                ("Pull Up", 3, 10),
                ("Hyperextension", 3, 12),
            ),
            _day(
                "day4", "Day 4: Shoulders & Triceps",
                ("Seated Military Press", 4, 10),
                ("Lateral Raise", 3, 12),
                ("Front Raise", 3, 12),
                ("Reverse Pec Deck", 3, 12),
                ("Barbell Shrugs", 4, 12),
                ("Dips", 4, 10),
                ("Seated French Press", 3, 12),
            ),
            _day(
                "day5", "Day 5: Run & Abs",
                ("Run (treadmill or outside) [min]", 1, 20),
                ("Plank [sec]", 3, 60),
                ("Hanging Leg Raise", 3, 12),
                ("Cable Crunch", 3, 15),
            ),
        ],
    )


def create_default_routine(user: User) -> User:
    """Give the user the default routine (replaces any existing one)"""
    return user.model_copy(update={"workout_routine": get_default_routine()})


def delete_routine(user: User) -> User:
    """Remove the routine, keeping the completion log"""
    return user.model_copy(update={"workout_routine": None})


def update_exercise(
    user: User,
    day_id: str,
    index: int,
    name: Optional[str] = None,
    sets: Optional[int] = None,
    reps: Optional[int] = None
) -> User:
    """
    Edit one exercise of a routine day

    Returns:
        New user snapshot, or the input user if the day/exercise doesn't exist
    """
    routine = user.workout_routine
    if routine is None:
        return user

    days = []
    changed = False
    for day in routine.days:
        if day.id == day_id and 0 <= index < len(day.exercises):
            exercises = list(day.exercises)
            current = exercises[index]
            exercises[index] = Exercise(
                name=(name or "").strip() or current.name,
                sets=max(0, sets) if sets is not None else current.sets,
                reps=max(0, reps) if reps is not None else current.reps,
            )
            day = day.model_copy(update={"exercises": exercises})
            changed = True
        days.append(day)

    if not changed:
        logger.debug(f"No exercise {index} on routine day {day_id}")
        return user

    return user.model_copy(update={"workout_routine": routine.model_copy(update={"days": days})})


def is_workout_completed(user: Optional[User], date: str) -> bool:
    if user is None:
        return False
    entry = user.workout_completion_by_date.get(date)
    return bool(entry and entry.completed)


def toggle_workout_completion(user: User, date: str) -> User:
    """Flip the workout completion flag for a date"""
    log = dict(user.workout_completion_by_date)
    log[date] = WorkoutCompletion(completed=not is_workout_completed(user, date))
    return user.model_copy(update={"workout_completion_by_date": log})


def compute_workout_streak(user: Optional[User], today: str) -> int:
    """Consecutive completed workout days ending today"""
    if user is None or safe_parse_iso_date(today) is None:
        return 0

    done = {day for day, entry in user.workout_completion_by_date.items() if entry.completed}
    streak = 0
    cursor = today
    while cursor in done and streak < len(done):
        streak += 1
        cursor = add_days(cursor, -1)
    return streak
