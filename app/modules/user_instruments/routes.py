from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.user_instruments.schemas import (
    UserInstrumentCreate, UserInstrumentsReplace, UserInstrumentResponse
)
from app.modules.user_instruments.service import UserInstrumentService
from app.core.dependencies import get_current_user, authorize
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/users", tags=["user-instruments"])


def get_user_instrument_service(supabase: Client = Depends(get_supabase)) -> UserInstrumentService:
    return UserInstrumentService(supabase)


@router.get("/{user_id}/instruments", response_model=DataResponse[List[UserInstrumentResponse]])
async def list_user_instruments(
    user_id: UuidPath,
    current_user: Dict = Depends(get_current_user),
    service: UserInstrumentService = Depends(get_user_instrument_service)
):
    """Instruments a user plays (self, or admin/leader)"""
    authorize(current_user, "user_instruments:read", is_owner=current_user["id"] == user_id,
              message="You can only view your own instruments")
    return {"data": service.list_for_user(user_id)}


@router.put("/{user_id}/instruments", response_model=DataResponse[List[UserInstrumentResponse]])
async def replace_user_instruments(
    user_id: UuidPath,
    data: UserInstrumentsReplace,
    current_user: Dict = Depends(get_current_user),
    service: UserInstrumentService = Depends(get_user_instrument_service)
):
    """Replace the instruments a user plays (self or admin)"""
    authorize(current_user, "user_instruments:update", is_owner=current_user["id"] == user_id,
              message="You can only update your own instruments")
    return {"data": service.replace_for_user(user_id, data)}


@router.post("/{user_id}/instruments", response_model=DataResponse[List[UserInstrumentResponse]], status_code=201)
async def add_user_instrument(
    user_id: UuidPath,
    data: UserInstrumentCreate,
    current_user: Dict = Depends(get_current_user),
    service: UserInstrumentService = Depends(get_user_instrument_service)
):
    authorize(current_user, "user_instruments:update", is_owner=current_user["id"] == user_id,
              message="You can only update your own instruments")
    return {"data": service.add_for_user(user_id, data)}


@router.delete("/{user_id}/instruments/{instrument_id}", response_model=DataResponse[MessageResponse])
async def remove_user_instrument(
    user_id: UuidPath,
    instrument_id: UuidPath,
    current_user: Dict = Depends(get_current_user),
    service: UserInstrumentService = Depends(get_user_instrument_service)
):
    authorize(current_user, "user_instruments:update", is_owner=current_user["id"] == user_id,
              message="You can only update your own instruments")
    service.remove_for_user(user_id, instrument_id)
    return {"data": {"message": "Instrument removed"}}
