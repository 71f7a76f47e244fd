import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from app.models.knowledge_request import KnowledgeRequest, KnowledgeResponse
from app.routers.dependencies import get_llm, limiter
from app.services.fields import FIELD_CATALOG
from app.services.llm import LLMClient
from app.services.onboarding import update_knowledge

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/knowledge",
    response_model=KnowledgeResponse,
    summary="Extract business knowledge and merge it into a profile",
)
@limiter.limit("30/minute")
async def knowledge_endpoint(
    request: Request,
    body: KnowledgeRequest,
    llm: LLMClient = Depends(get_llm),
) -> KnowledgeResponse:
    """Run every field extractor concurrently, then merge the results.

    Extractors that fail or return nothing usable leave their field untouched.
    """
    if body.fields is not None:
        unknown = sorted(set(body.fields) - set(FIELD_CATALOG))
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown field(s): {', '.join(unknown)}")

    profile, extracted = await update_knowledge(
        body.corpus, body.transcript, llm, profile=body.profile, fields=body.fields
    )
    logger.info("Knowledge update produced %d field(s)", len(extracted))
    return KnowledgeResponse(profile=profile, extracted=extracted)
