from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.section_item import create_section_item, delete_section_item, get_section_item
from cloud_kitchen.crud.section_item import get_section_items, update_section_item
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.models import SectionTypeEnum
from cloud_kitchen.schemas.section_item import SectionItemCreate, SectionItemRead, SectionItemUpdate

router = APIRouter(prefix="/api/section-items", tags=["section-items"])


@router.get("/", response_model=List[SectionItemRead])
async def list_section_items(
    section_type: Optional[SectionTypeEnum] = Query(None, description="offers | todaysSpecial | whatsNew"),
    active_only: bool = Query(False, description="Только активные"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Элементы каруселей главной страницы, отсортированные по priority.
    """
    return await get_section_items(db, section_type=section_type, active_only=active_only)


@router.post("/", response_model=SectionItemRead, status_code=201)
async def create_section_item_endpoint(item_in: SectionItemCreate, db: AsyncSession = Depends(get_async_session)):
    return await create_section_item(db, item_in)


@router.get("/{item_id}", response_model=SectionItemRead)
async def get_section_item_endpoint(item_id: int, db: AsyncSession = Depends(get_async_session)):
    item = await get_section_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Section item not found")
    return item


@router.put("/{item_id}", response_model=SectionItemRead)
async def update_section_item_endpoint(
    item_id: int,
    item_in: SectionItemUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    item = await update_section_item(db, item_id, item_in)
    if not item:
        raise HTTPException(status_code=404, detail="Section item not found")
    return item


@router.delete("/{item_id}", status_code=204)
async def remove_section_item(item_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await delete_section_item(db, item_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Section item not found")
