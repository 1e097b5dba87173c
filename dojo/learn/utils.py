import os
import subprocess
import sys
import tempfile
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy.exc import IntegrityError

from dojo import db
from dojo.models import UserProfile, UserActivityProgress

XP_PER_LEVEL = 100          # level N needs N * XP_PER_LEVEL total xp
FAILED_XP_FRACTION = 0.1    # share of xp_reward granted on a failed attempt


# ── Profile / XP ──────────────────────────────────────────────────────────────

def _get_or_create_profile(user_id: int) -> UserProfile:
    """Return the user's profile, creating a level-1 one on first visit."""
    profile = UserProfile.query.filter_by(user_id=user_id).first()
    if not profile:
        profile = UserProfile(user_id=user_id, level=1, xp=0)
        db.session.add(profile)
        try:
            db.session.commit()
        except IntegrityError:
            # another request created it first
            db.session.rollback()
            profile = UserProfile.query.filter_by(user_id=user_id).one()
    return profile


def _xp_for_attempt(xp_reward: int, passed: bool) -> int:
    if passed:
        return xp_reward
    return int(xp_reward * FAILED_XP_FRACTION)


def _award_xp(profile: UserProfile, xp_gained: int) -> UserProfile:
    """Add xp and level up at most once. Does not commit."""
    new_xp = profile.xp + xp_gained
    if new_xp >= profile.level * XP_PER_LEVEL:
        profile.level += 1
    profile.xp = new_xp
    return profile


def _record_attempt(profile: UserProfile, activity_id: int,
                    score: int, passed: bool) -> UserActivityProgress:
    """Upsert the progress row for one submission. Does not commit."""
    prog = UserActivityProgress.query.filter_by(
        profile_id=profile.id, activity_id=activity_id
    ).first()
    if not prog:
        prog = UserActivityProgress(
            profile_id=profile.id,
            activity_id=activity_id,
            completed=False,
            score=0,
            attempts=0,
        )
        db.session.add(prog)

    prog.attempts += 1
    prog.score = score
    prog.completed = prog.completed or passed
    prog.last_attempt = datetime.now(timezone.utc)
    db.session.flush()
    return prog


def _completed_activity_ids(profile_id: int) -> set:
    rows = UserActivityProgress.query.filter_by(profile_id=profile_id, completed=True).all()
    return {r.activity_id for r in rows}


# ── Code execution ────────────────────────────────────────────────────────────

def _execute_code(code: str, stdin: str = "") -> dict:
    """Execute learner Python code locally in a subprocess."""
    timeout = current_app.config.get("CODE_TIMEOUT", 5)
    fname = None
    try:
        with tempfile.NamedTemporaryFile(suffix=".py", mode="w", delete=False) as f:
            f.write(code)
            fname = f.name

        result = subprocess.run(
            [sys.executable, fname],
            input=stdin,
            capture_output=True,
            text=True,
            timeout=timeout,
        )

        return {
            "stdout": result.stdout,
            "stderr": result.stderr,
            "error":  result.stderr if result.returncode != 0 else "",
        }

    except subprocess.TimeoutExpired:
        return {"stdout": "", "stderr": "", "error": f"Execution timed out ({timeout}s limit)."}
    except OSError as exc:
        return {"stdout": "", "stderr": "", "error": f"Execution error: {exc}"}
    finally:
        if fname:
            try:
                os.unlink(fname)
            except OSError:
                pass


def _check_solution(output: str, check: str) -> bool:
    """True if the expected text appears in the output, ignoring case."""
    return str(check).strip().lower() in output.lower()
