"""Knowledge base documents."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.deps import StoreDep
from schemas.requests import DocumentUpsert
from services.knowledge import ingest_document, list_documents

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.get("")
async def list_knowledge(db: StoreDep):
    return JSONResponse({"documents": list_documents(db)})


@router.put("")
async def put_document(body: DocumentUpsert, db: StoreDep):
    doc = ingest_document(body.slug, body.title, body.body, db)
    return JSONResponse({k: v for k, v in doc.items() if k != "embedding"})
