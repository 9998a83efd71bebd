"""Tag and tag category API routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.api.auth import require_api_key
from tradejournal.database import get_db
from tradejournal.services.journal_store import JournalStore, RecordNotFoundError

router = APIRouter(prefix="/api/tags", tags=["tags"])


class TagCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field("#64748b", max_length=20)


class TagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    category_id: int


@router.get("/")
async def list_tags(db: AsyncSession = Depends(get_db)):
    """All categories and all tags."""
    store = JournalStore(db)
    return {
        "categories": await store.list_tag_categories(),
        "tags": await store.list_tags(),
    }


@router.post("/categories", status_code=201, dependencies=[Depends(require_api_key)])
async def add_category(req: TagCategoryRequest, db: AsyncSession = Depends(get_db)):
    return await JournalStore(db).add_tag_category(req.name, req.color)


@router.delete("/categories/{category_id}", dependencies=[Depends(require_api_key)])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a category and every tag in it."""
    try:
        await JournalStore(db).delete_tag_category(category_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "id": category_id}


@router.post("/", status_code=201, dependencies=[Depends(require_api_key)])
async def add_tag(req: TagRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await JournalStore(db).add_tag(req.name, req.category_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{tag_id}", dependencies=[Depends(require_api_key)])
async def delete_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await JournalStore(db).delete_tag(tag_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "id": tag_id}
