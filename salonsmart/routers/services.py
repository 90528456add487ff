from fastapi import APIRouter, Depends
from typing import List, Optional
from .. import schemas
from ..deps import get_service_repo
from ..models import ServiceCategory
from ..repositories.services import ServiceRepository

router = APIRouter(prefix="/services", tags=["services"])


@router.get("/", response_model=List[schemas.ServiceOut])
def list_services(
    category: Optional[ServiceCategory] = None,
    q: Optional[str] = None,
    repo: ServiceRepository = Depends(get_service_repo),
):
    return repo.list(category=category.value if category else None, q=q)


@router.get("/{service_id}", response_model=schemas.ServiceOut)
def get_service(service_id: str, repo: ServiceRepository = Depends(get_service_repo)):
    return repo.get(service_id)


@router.post("/", response_model=schemas.ServiceOut)
def create_service(payload: schemas.ServiceCreate, repo: ServiceRepository = Depends(get_service_repo)):
    return repo.create(payload)


@router.put("/{service_id}", response_model=schemas.ServiceOut)
def update_service(service_id: str, payload: schemas.ServiceUpdate, repo: ServiceRepository = Depends(get_service_repo)):
    return repo.update(service_id, payload)


@router.delete("/{service_id}")
def delete_service(service_id: str, repo: ServiceRepository = Depends(get_service_repo)):
    repo.delete(service_id)
    return {"ok": True}
