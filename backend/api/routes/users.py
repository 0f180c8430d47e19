"""User CRUD endpoints (v1 and v2) plus register/login."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from api.dependencies import get_user_service
from models.requests import LoginRequest, UserCreate, UserUpdate
from models.responses import AuthResponse, PagedResponse, UserResponse
from services.user_service import (
    EmailAlreadyRegisteredError,
    UserService,
    issue_token,
    to_response,
)

logger = logging.getLogger(__name__)

V1_PREFIX = "/api/v1/users"
V2_PREFIX = "/api/v2/users"
MAX_PAGE_SIZE = 100
API_V2 = "2.0"

router = APIRouter(prefix=V1_PREFIX, tags=["Users"])
router_v2 = APIRouter(prefix=V2_PREFIX, tags=["Users v2"])


def _base_url(request: Request, prefix: str) -> str:
    return f"{str(request.base_url).rstrip('/')}{prefix}"


def _validate_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise HTTPException(status_code=400, detail="Page number must be greater than 0")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise HTTPException(status_code=400, detail=f"Page size must be between 1 and {MAX_PAGE_SIZE}")


# --- v1 ---


@router.get("", response_model=PagedResponse)
async def list_users(
    request: Request,
    page: int = 1,
    page_size: int = 10,
    service: UserService = Depends(get_user_service),
):
    _validate_paging(page, page_size)
    return await service.list_users(page, page_size, _base_url(request, V1_PREFIX))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(request: Request, user_id: int, service: UserService = Depends(get_user_service)):
    user = await service.get_user(user_id, _base_url(request, V1_PREFIX))
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(request: Request, body: UserCreate, service: UserService = Depends(get_user_service)):
    try:
        return await service.create_user(body, _base_url(request, V1_PREFIX))
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    try:
        user = await service.update_user(user_id, body, _base_url(request, V1_PREFIX))
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    if not await service.delete_user(user_id):
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return Response(status_code=204)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: Request, body: UserCreate, service: UserService = Depends(get_user_service)):
    try:
        user = await service.register(body)
    except EmailAlreadyRegisteredError as e:
        return JSONResponse(
            status_code=409,
            content=AuthResponse(success=False, message=str(e)).model_dump(mode="json"),
        )
    return AuthResponse(
        success=True,
        message="User registered successfully",
        user=to_response(user, _base_url(request, V1_PREFIX)),
        token=issue_token(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: Request, body: LoginRequest, service: UserService = Depends(get_user_service)):
    user = await service.authenticate(body.email, body.password)
    if user is None:
        return JSONResponse(
            status_code=401,
            content=AuthResponse(success=False, message="Invalid email or password").model_dump(mode="json"),
        )
    return AuthResponse(
        success=True,
        message="Login successful",
        user=to_response(user, _base_url(request, V1_PREFIX)),
        token=issue_token(user),
    )


# --- v2: same data, larger default page and metadata headers ---


@router_v2.get("", response_model=PagedResponse)
async def list_users_v2(
    request: Request,
    response: Response,
    page: int = 1,
    page_size: int = 20,
    service: UserService = Depends(get_user_service),
):
    _validate_paging(page, page_size)
    result = await service.list_users(page, page_size, _base_url(request, V2_PREFIX))
    response.headers["X-API-Version"] = API_V2
    response.headers["X-Total-Count"] = str(result.total_items)
    response.headers["X-Total-Pages"] = str(result.total_pages)
    return result


@router_v2.get("/{user_id}", response_model=UserResponse)
async def get_user_v2(
    request: Request,
    response: Response,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id, _base_url(request, V2_PREFIX))
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    response.headers["X-API-Version"] = API_V2
    return user


@router_v2.post("", response_model=UserResponse, status_code=201)
async def create_user_v2(
    request: Request,
    response: Response,
    body: UserCreate,
    service: UserService = Depends(get_user_service),
):
    base_url = _base_url(request, V2_PREFIX)
    try:
        user = await service.create_user(body, base_url)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e))
    response.headers["X-API-Version"] = API_V2
    response.headers["Location"] = f"{base_url}/{user.id}"
    logger.info("Created user %d via v2", user.id)
    return user


@router_v2.put("/{user_id}", response_model=UserResponse)
async def update_user_v2(
    request: Request,
    response: Response,
    user_id: int,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    try:
        user = await service.update_user(user_id, body, _base_url(request, V2_PREFIX))
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    response.headers["X-API-Version"] = API_V2
    return user


@router_v2.delete("/{user_id}", status_code=204)
async def delete_user_v2(user_id: int, service: UserService = Depends(get_user_service)):
    if not await service.delete_user(user_id):
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return Response(status_code=204, headers={"X-API-Version": API_V2})
