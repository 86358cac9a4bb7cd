"""Capability checks for the authenticated principal.

Every user carries a set of ``(role, scope)`` capabilities built from their
role rows. ``scope`` is the franchise id for franchisee roles and ``None`` for
global roles. Routes ask one of the named predicates below instead of
inspecting roles directly.

Two enforcement styles exist and are kept apart on purpose:

* hard rejects: the route raises 403 when the predicate fails
  (franchise creation, store management, menu changes, user updates);
* visibility filtering: the route fetches first and returns an empty result
  when the predicate fails (``can_view_user_franchises``).
"""
from typing import FrozenSet, NamedTuple, Optional

from models.user import Role, User


class Capability(NamedTuple):
    role: Role
    scope: Optional[int] = None


def capabilities(user: Optional[User]) -> FrozenSet[Capability]:
    if user is None:
        return frozenset()
    return frozenset(Capability(r.role, r.object_id) for r in user.roles)


def is_admin(user: Optional[User]) -> bool:
    return any(cap.role == Role.ADMIN for cap in capabilities(user))


def is_franchise_admin(user: Optional[User], franchise_id: int) -> bool:
    return Capability(Role.FRANCHISEE, franchise_id) in capabilities(user)


def can_manage_franchise(user: Optional[User], franchise_id: int) -> bool:
    """Admins manage every franchise; franchisees only their own."""
    return is_admin(user) or is_franchise_admin(user, franchise_id)


def can_update_user(actor: Optional[User], target_id: int) -> bool:
    # Self-service only. There is no admin override for editing other accounts.
    return actor is not None and actor.id == target_id


def can_view_user_franchises(actor: Optional[User], target_id: int) -> bool:
    return actor is not None and (is_admin(actor) or actor.id == target_id)
