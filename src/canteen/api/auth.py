"""Request principal, as asserted by the upstream authentication service.

The gateway in front of this API verifies credentials and forwards the
caller's identity in two headers. Nothing here checks passwords or tokens.
"""

from fastapi import Header, HTTPException

from canteen.shared.actor import Actor, ActorRole


def current_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Actor:
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=401, detail="Access denied. No principal provided.")
    try:
        role = ActorRole(x_actor_role.lower())
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid user type.") from exc
    return Actor(id=x_actor_id, role=role)


def current_student(x_actor_id: str | None = Header(default=None), x_actor_role: str | None = Header(default=None)):
    actor = current_actor(x_actor_id, x_actor_role)
    if not actor.is_student:
        raise HTTPException(status_code=403, detail="Access denied. Students only.")
    return actor


def current_shop(x_actor_id: str | None = Header(default=None), x_actor_role: str | None = Header(default=None)):
    actor = current_actor(x_actor_id, x_actor_role)
    if not actor.is_shop:
        raise HTTPException(status_code=403, detail="Access denied. Shopkeepers only.")
    return actor
