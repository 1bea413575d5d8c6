from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional, List
from spartec.schemas import MaterialCreate, MaterialUpdate, Material as MaterialSchema
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError
from spartec.services.dashboard import low_stock_materials
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/materials", response_model=List[MaterialSchema])
async def get_materials(
    search: Optional[str] = Query(None, description="Search by article number, name, brand, category or supplier"),
    low_stock: bool = Query(False, alias="lowStock", description="Only materials at or below minimum stock"),
    storage: Storage = Depends(get_storage)
):
    try:
        materials = storage.materials.get_all(search=search)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching materials")

    if low_stock:
        materials = low_stock_materials(materials)

    return materials


@router.get("/materials/{material_id}", response_model=MaterialSchema)
async def get_material(material_id: int, storage: Storage = Depends(get_storage)):
    try:
        material = storage.materials.get_by_id(material_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching material")

    if not material:
        raise HTTPException(status_code=404, detail="Material not found")

    return material


@router.post("/materials", response_model=MaterialSchema, status_code=status.HTTP_201_CREATED)
async def create_material(material_data: MaterialCreate, storage: Storage = Depends(get_storage)):
    """Create a material; the article number is assigned by the server"""
    try:
        return storage.materials.create(material_data.model_dump())
    except StorageError:
        raise HTTPException(status_code=500, detail="Error creating material")


@router.put("/materials/{material_id}", response_model=MaterialSchema)
async def update_material(
    material_id: int,
    material_data: MaterialUpdate,
    storage: Storage = Depends(get_storage)
):
    try:
        material = storage.materials.update(material_id, material_data.model_dump(exclude_unset=True))
    except StorageError:
        raise HTTPException(status_code=500, detail="Error updating material")

    if not material:
        raise HTTPException(status_code=404, detail="Material not found")

    logger.info(f"Updated material {material['article_number']}")
    return material


@router.delete("/materials/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_material(material_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.materials.delete(material_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error deleting material")

    if not deleted:
        raise HTTPException(status_code=404, detail="Material not found")

    logger.info(f"Deleted material {material_id}")
    return None
