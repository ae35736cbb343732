from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.services.models import ServiceStatus
from app.modules.service_types.schemas import ServiceTypeResponse
from app.modules.worship_sets.schemas import WorshipSetResponse, WorshipSetDetailResponse
from app.modules.assignments.schemas import AssigneeSummary


class ServiceCreate(CamelModel):
    date: datetime
    service_type_id: str = Field(pattern=UUID_PATTERN)
    leader_id: Optional[str] = Field(None, pattern=UUID_PATTERN)
    notes: Optional[str] = Field(None, max_length=500)


class ServiceUpdate(CamelModel):
    date: Optional[datetime] = None
    service_type_id: Optional[str] = Field(None, pattern=UUID_PATTERN)
    status: Optional[ServiceStatus] = None
    leader_id: Optional[str] = Field(None, pattern=UUID_PATTERN)
    worship_set_leader_id: Optional[str] = Field(None, pattern=UUID_PATTERN)


class ServiceResponse(CamelModel):
    id: str
    service_type_id: str
    service_date: datetime
    leader_id: Optional[str] = None
    status: ServiceStatus = ServiceStatus.PLANNED
    created_at: Optional[datetime] = None
    service_type: Optional[ServiceTypeResponse] = None
    leader: Optional[AssigneeSummary] = None
    worship_set: Optional[WorshipSetResponse] = None


class ServiceDetailResponse(ServiceResponse):
    worship_set: Optional[WorshipSetDetailResponse] = None
