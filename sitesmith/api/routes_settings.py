from typing import Optional
from fastapi import APIRouter, Depends, Query
from sitesmith.api.deps import get_model_router, get_store
from sitesmith.core.config import settings
from sitesmith.core.errors import ConfigurationError, NotFoundError, ValidationError
from sitesmith.db.store import ProjectStore
from sitesmith.providers.catalog import load_catalog
from sitesmith.providers.router import ModelRouter
from sitesmith.schemas.settings import AIConfigResponse, SettingsRequest, SettingsResponse

router = APIRouter()

@router.get("/settings", response_model=SettingsResponse)
def get_settings(
    user_id: str = Query(settings.default_user_id, alias="userId"),
    store: ProjectStore = Depends(get_store),
):
    row = store.get_settings(user_id)
    if row is None:
        raise NotFoundError("No settings found. Please configure AI provider and API keys in settings.")
    return SettingsResponse.from_row(row)

@router.post("/settings", response_model=SettingsResponse)
def save_settings(req: SettingsRequest, store: ProjectStore = Depends(get_store)):
    catalog = load_catalog()
    provider = catalog.get(req.ai_provider)
    if provider is None:
        raise ValidationError(f"Unsupported AI provider: {req.ai_provider}")
    model = req.ai_model or provider.default_model

    api_keys = None
    if req.api_keys is not None:
        # Masked values echoed back by a client keep the stored key
        existing = store.get_settings(req.user_id or settings.default_user_id)
        stored_keys = (existing.api_keys if existing else None) or {}
        api_keys = {
            name: (stored_keys.get(name, "") if "*" in key else key)
            for name, key in req.api_keys.items()
            if key
        }

    row = store.upsert_settings(
        user_id=req.user_id or settings.default_user_id,
        ai_provider=req.ai_provider,
        ai_model=model,
        api_keys=api_keys,
        preferences=req.preferences,
    )
    return SettingsResponse.from_row(row)

@router.get("/ai-config", response_model=AIConfigResponse)
def get_ai_config(model_router: ModelRouter = Depends(get_model_router)):
    available = list(load_catalog().keys())
    try:
        config = model_router.resolve_config()
    except ConfigurationError:
        stored = model_router.settings_source()
        provider = getattr(stored, "ai_provider", None) or settings.default_provider
        return AIConfigResponse(
            provider=provider,
            model=getattr(stored, "ai_model", None),
            has_api_key=False,
            available_providers=available,
        )
    return AIConfigResponse(
        provider=config.provider,
        model=config.model,
        has_api_key=True,
        available_providers=available,
    )

@router.get("/ai-models")
def get_ai_models(provider: Optional[str] = None):
    catalog = load_catalog()
    if provider is not None:
        entry = catalog.get(provider)
        if entry is None:
            raise NotFoundError(f"Unknown AI provider: {provider}")
        return [entry.to_dict()]
    return [entry.to_dict() for entry in catalog.values()]
