from fastapi import APIRouter, Depends, Request

from catalog.config import Settings, get_settings
from catalog.exceptions import RequestBodyError
from catalog.models import LoginRequest, read_json_object
from catalog.services.auth_service import authenticate_admin, require_token

router = APIRouter()


@router.post("/login")
async def login(request: Request, settings: Settings = Depends(get_settings)):
    # a body of the wrong shape is just a failed login
    try:
        body = await read_json_object(request)
    except RequestBodyError:
        body = {}
    credentials = LoginRequest.model_validate(body)
    token = authenticate_admin(credentials.username, credentials.password, settings)
    return {"token": token}


@router.get("/verify", dependencies=[Depends(require_token)])
async def verify():
    return {"valid": True}
