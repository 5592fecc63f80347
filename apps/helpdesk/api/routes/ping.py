from fastapi import APIRouter

from apps.helpdesk.dependencies.auth import CurrentActor

router = APIRouter(prefix="/ping", tags=["health"])


@router.get("", summary="Public health check")
async def ping() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/whoami", summary="Resolve the caller's identity and role")
async def whoami(actor: CurrentActor) -> dict[str, str]:
    return {"status": "ok", "user_id": actor.id, "role": actor.role.value}
