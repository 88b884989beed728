from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_generator, http_error
from ..errors import GenerationServiceError
from ..models.schema import CodeRequest, CompletionRequest, FixRequest
from ..services.assistant import TextGenerationService

router = APIRouter(prefix="/ai", tags=["assistant"])

# Plain ``def`` handlers: the generation client blocks, so FastAPI runs them in its threadpool.


@router.post("/complete")
def complete(req: CompletionRequest, generator: TextGenerationService = Depends(get_generator)):
    try:
        return {"completion": generator.complete(req.code, req.language, req.maxTokens)}
    except GenerationServiceError as err:
        raise http_error(err)


@router.post("/explain")
def explain(req: CodeRequest, generator: TextGenerationService = Depends(get_generator)):
    try:
        return {"explanation": generator.explain(req.code, req.language)}
    except GenerationServiceError as err:
        raise http_error(err)


@router.post("/fix")
def fix(req: FixRequest, generator: TextGenerationService = Depends(get_generator)):
    try:
        return {"fixedCode": generator.fix(req.code, req.error, req.language)}
    except GenerationServiceError as err:
        raise http_error(err)


@router.post("/document")
def document(req: CodeRequest, generator: TextGenerationService = Depends(get_generator)):
    try:
        return {"documentation": generator.document(req.code, req.language)}
    except GenerationServiceError as err:
        raise http_error(err)
