# salonsmart/routers/auth.py
import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from .. import schemas
from ..auth import demo_principal, token_for
from ..deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=schemas.Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    # Demo mode: every username/password pair signs in
    principal = demo_principal(form_data.username)
    logger.info("Demo sign-in for %s as %s", principal.email, principal.role.value)
    return {"access_token": token_for(principal), "token_type": "bearer", "role": principal.role}


@router.post("/signup", response_model=schemas.Token)
def signup(user_in: schemas.SignupRequest):
    principal = demo_principal(user_in.email, user_in.full_name)
    logger.info("Demo sign-up for %s", principal.email)
    return {"access_token": token_for(principal), "token_type": "bearer", "role": principal.role}


@router.post("/role", response_model=schemas.Token)
def switch_role(payload: schemas.RoleSwitch, user: schemas.Principal = Depends(get_current_user)):
    principal = user.model_copy(update={"role": payload.role})
    return {"access_token": token_for(principal), "token_type": "bearer", "role": principal.role}


@router.get("/me", response_model=schemas.Principal)
def me(user: schemas.Principal = Depends(get_current_user)):
    return user


@router.post("/logout")
def logout(user: schemas.Principal = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy
    return {"ok": True}
