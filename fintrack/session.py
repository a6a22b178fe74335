"""Explicit login state, passed to whoever needs the current user.

States: Anonymous -> Authenticating -> Authenticated(user) | Failed(reason).
Transitions are pure and return ``Left`` when not allowed from the current
state. Credentials are checked elsewhere; this module only tracks outcomes.
"""

from dataclasses import dataclass
from typing import Union

from fintrack.domain import Snapshot, User
from fintrack.functional import Either, Left, Maybe, Nothing, Right, Some
from fintrack.transforms import scope_to_user


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticating:
    email: str


@dataclass(frozen=True)
class Authenticated:
    user: User


@dataclass(frozen=True)
class Failed:
    reason: str


SessionState = Union[Anonymous, Authenticating, Authenticated, Failed]


def _bad_transition(state: SessionState, action: str) -> Left:
    return Left({
        "error": "invalid_transition",
        "message": f"Cannot {action} from {type(state).__name__}",
        "state": state,
    })


def begin_login(state: SessionState, email: str) -> Either[dict, SessionState]:
    if isinstance(state, (Anonymous, Failed)):
        return Right(Authenticating(email=email))
    return _bad_transition(state, "begin login")


def login_succeeded(state: SessionState, user: User) -> Either[dict, SessionState]:
    if isinstance(state, Authenticating):
        return Right(Authenticated(user=user))
    return _bad_transition(state, "complete login")


def login_failed(state: SessionState, reason: str) -> Either[dict, SessionState]:
    if isinstance(state, Authenticating):
        return Right(Failed(reason=reason))
    return _bad_transition(state, "fail login")


def logout(state: SessionState) -> SessionState:
    return Anonymous()


def current_user_id(state: SessionState) -> Maybe[str]:
    if isinstance(state, Authenticated):
        return Some(state.user.id)
    return Nothing()


def visible_snapshot(state: SessionState, snapshot: Snapshot) -> Snapshot:
    """The part of ``snapshot`` the session may see; nothing when logged out."""
    user_id = current_user_id(state).get_or_else(None)
    if user_id is None:
        return snapshot._replace(expenses=(), budgets=(), income_sources=())
    return scope_to_user(snapshot, user_id)
