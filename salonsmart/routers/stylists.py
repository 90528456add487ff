from fastapi import APIRouter, Depends
from typing import List
from .. import schemas
from ..deps import get_stylist_repo
from ..repositories.stylists import StylistRepository

router = APIRouter(prefix="/stylists", tags=["stylists"])

@router.get("/", response_model=List[schemas.StylistOut])
def list_stylists(repo: StylistRepository = Depends(get_stylist_repo)):
    return repo.list()

@router.get("/{stylist_id}", response_model=schemas.StylistOut)
def get_stylist(stylist_id: str, repo: StylistRepository = Depends(get_stylist_repo)):
    return repo.get(stylist_id)

@router.post("/", response_model=schemas.StylistOut)
def create_stylist(payload: schemas.StylistCreate, repo: StylistRepository = Depends(get_stylist_repo)):
    return repo.create(payload)

@router.put("/{stylist_id}", response_model=schemas.StylistOut)
def update_stylist(stylist_id: str, payload: schemas.StylistUpdate, repo: StylistRepository = Depends(get_stylist_repo)):
    return repo.update(stylist_id, payload)

@router.delete("/{stylist_id}")
def delete_stylist(stylist_id: str, repo: StylistRepository = Depends(get_stylist_repo)):
    repo.delete(stylist_id)
    return {"ok": True}
