import logging
from supabase import Client
from app.modules.instruments.schemas import InstrumentCreate, InstrumentUpdate, InstrumentResponse
from app.core.exceptions import (
    NotFoundError, ConflictError, ValidationError, InternalError,
    is_unique_violation, is_foreign_key_violation
)
from app.database.supabase_client import fetch_one
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_CODE_MESSAGE = "An instrument with this code already exists"


class InstrumentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_instruments(self) -> List[InstrumentResponse]:
        try:
            result = self.supabase.table("instruments").select("*").order("code").execute()
            return [InstrumentResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing instruments: {e}")
            raise InternalError("Failed to fetch instruments")

    def get_instrument(self, instrument_id: str) -> InstrumentResponse:
        try:
            row = fetch_one(self.supabase, "instruments", instrument_id)
            if not row:
                raise NotFoundError("Instrument not found")
            return InstrumentResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching instrument {instrument_id}: {e}")
            raise InternalError("Failed to fetch instrument")

    def create_instrument(self, data: InstrumentCreate) -> InstrumentResponse:
        try:
            result = self.supabase.table("instruments")\
                .insert(data.model_dump(mode="json"))\
                .execute()
            if not result.data:
                raise InternalError("Failed to create instrument")
            logger.info(f"Created instrument {data.code}")
            return InstrumentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_CODE_MESSAGE)
            logger.error(f"Error creating instrument: {e}")
            raise InternalError("Failed to create instrument")

    def update_instrument(self, instrument_id: str, data: InstrumentUpdate) -> InstrumentResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self.get_instrument(instrument_id)
            result = self.supabase.table("instruments")\
                .update(update_data)\
                .eq("id", instrument_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Instrument not found")
            return InstrumentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_CODE_MESSAGE)
            logger.error(f"Error updating instrument {instrument_id}: {e}")
            raise InternalError("Failed to update instrument")

    def delete_instrument(self, instrument_id: str) -> None:
        """Delete an instrument no assignment or default assignment still points at."""
        try:
            if not fetch_one(self.supabase, "instruments", instrument_id, "id"):
                raise NotFoundError("Instrument not found")
            for table in ("assignments", "default_assignments"):
                refs = self.supabase.table(table)\
                    .select("id")\
                    .eq("instrument_id", instrument_id)\
                    .limit(1)\
                    .execute()
                if refs.data:
                    raise ValidationError("Cannot delete instrument that has assignments or default assignments")
            # Players' profiles do not block deletion
            self.supabase.table("user_instruments").delete().eq("instrument_id", instrument_id).execute()
            self.supabase.table("instruments").delete().eq("id", instrument_id).execute()
            logger.info(f"Deleted instrument {instrument_id}")
        except HTTPException:
            raise
        except Exception as e:
            if is_foreign_key_violation(e):
                raise ValidationError("Cannot delete instrument that has assignments or default assignments")
            logger.error(f"Error deleting instrument {instrument_id}: {e}")
            raise InternalError("Failed to delete instrument")
