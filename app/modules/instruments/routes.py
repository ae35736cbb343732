from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.instruments.schemas import InstrumentCreate, InstrumentUpdate, InstrumentResponse
from app.modules.instruments.service import InstrumentService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/instruments", tags=["instruments"])


def get_instrument_service(supabase: Client = Depends(get_supabase)) -> InstrumentService:
    return InstrumentService(supabase)


@router.get("", response_model=DataResponse[List[InstrumentResponse]])
async def list_instruments(
    user_data: Dict = Depends(require_permission("instruments:read")),
    service: InstrumentService = Depends(get_instrument_service)
):
    return {"data": service.list_instruments()}


@router.get("/{instrument_id}", response_model=DataResponse[InstrumentResponse])
async def get_instrument(
    instrument_id: UuidPath,
    user_data: Dict = Depends(require_permission("instruments:read")),
    service: InstrumentService = Depends(get_instrument_service)
):
    return {"data": service.get_instrument(instrument_id)}


@router.post("", response_model=DataResponse[InstrumentResponse], status_code=201)
async def create_instrument(
    data: InstrumentCreate,
    user_data: Dict = Depends(require_permission("instruments:create")),
    service: InstrumentService = Depends(get_instrument_service)
):
    """Create instrument (admin only)"""
    return {"data": service.create_instrument(data)}


@router.put("/{instrument_id}", response_model=DataResponse[InstrumentResponse])
async def update_instrument(
    instrument_id: UuidPath,
    data: InstrumentUpdate,
    user_data: Dict = Depends(require_permission("instruments:update")),
    service: InstrumentService = Depends(get_instrument_service)
):
    return {"data": service.update_instrument(instrument_id, data)}


@router.delete("/{instrument_id}", response_model=DataResponse[MessageResponse])
async def delete_instrument(
    instrument_id: UuidPath,
    user_data: Dict = Depends(require_permission("instruments:delete")),
    service: InstrumentService = Depends(get_instrument_service)
):
    service.delete_instrument(instrument_id)
    return {"data": {"message": "Instrument deleted"}}
