from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from core.auth import register_user
from core.auth.deps import get_current_actor
from core.auth.model import Actor
from core.integrations.supabase.auth import auth_manager
from core.profiles import profile_repo
from schemas import RegisterRequest, success_response


router = APIRouter(prefix="/auth", tags=["认证"])


def actor_out(actor: Actor) -> dict:
    return {
        "id": actor.id,
        "displayName": actor.display_name,
        "role": actor.role.value if actor.role else None,
    }


@router.post("/register", summary="注册用户")
async def register(payload: RegisterRequest):
    actor = await register_user(
        auth_manager,
        profile_repo,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
        role=payload.role,
    )
    return success_response(actor_out(actor))


@router.post("/token", summary="获取Token")
async def get_token(form_data: OAuth2PasswordRequestForm = Depends()):
    # username 即登录邮箱
    return await auth_manager.sign_in(form_data.username, form_data.password)


@router.get("/me", summary="当前用户")
async def me(actor: Actor = Depends(get_current_actor)):
    return success_response(actor_out(actor))
