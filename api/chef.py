from fastapi import APIRouter, Depends

from core.session import RecipeSession
from exceptions import ImageUnreadableError
from models.ai_models import (
    ChefRequest,
    GenerateRequest,
    ImageScanRequest,
    RequestType,
    ScanResult,
    ScanToRecipeRequest,
)
from models.recipe import Recipe
from services.ai_gateway import ChefGateway
from .dependencies import get_gateway, get_session

router = APIRouter()


@router.post("/generate", response_model=Recipe)
async def generate_recipe(request: GenerateRequest, session: RecipeSession = Depends(get_session)):
    """Generate a recipe; the stored draft is cleared on success"""
    return await session.generate(request)


@router.post("/scan", response_model=ScanResult)
async def scan_image(request: ImageScanRequest, gateway: ChefGateway = Depends(get_gateway)):
    """Read ingredients or a written recipe from a photo"""
    result = await gateway.scan_image(request)
    if not result.is_readable:
        raise ImageUnreadableError(result.unreadable_reason)
    return result


@router.post("/scan-to-recipe", response_model=Recipe)
async def scan_to_recipe(request: ScanToRecipeRequest, session: RecipeSession = Depends(get_session)):
    """Scan an ingredient photo and generate a recipe from what was found"""
    return await session.scan_and_generate(
        request.to_scan_request(),
        difficulty=request.difficulty,
        servings=request.servings,
        wishes=request.wishes
    )


# Replies are either a Recipe or a ScanResult, serialized with their camelCase keys
@router.post("/", response_model=None)
async def handle_chef_request(request: ChefRequest, session: RecipeSession = Depends(get_session)):
    """Typed dispatcher: {"type": "generate" | "scan-to-recipe" | "ocr", ...}"""
    if request.type == RequestType.GENERATE:
        return await session.generate(request.to_generate_request())
    return await session.gateway.handle(request.model_dump(by_alias=True, mode="json"))
