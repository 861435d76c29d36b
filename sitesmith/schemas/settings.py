from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"


class SettingsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    ai_provider: str = Field(..., alias="aiProvider", examples=["gemini"])
    ai_model: Optional[str] = Field(None, alias="aiModel", examples=["gemini-1.5-flash"])
    api_keys: Optional[Dict[str, str]] = Field(None, alias="apiKeys")
    preferences: Optional[Dict[str, Any]] = None


class SettingsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    ai_provider: str = Field(..., alias="aiProvider")
    ai_model: str = Field(..., alias="aiModel")
    api_keys: Dict[str, str] = Field(default_factory=dict, alias="apiKeys")
    preferences: Dict[str, Any] = {}
    updated_at: str = Field(..., alias="updatedAt")

    @classmethod
    def from_row(cls, row) -> "SettingsResponse":
        return cls(
            user_id=row.user_id,
            ai_provider=row.ai_provider,
            ai_model=row.ai_model,
            api_keys={provider: mask_key(key) for provider, key in (row.api_keys or {}).items()},
            preferences=row.preferences or {},
            updated_at=row.updated_at.isoformat(),
        )


class AIConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str
    model: Optional[str] = None
    has_api_key: bool = Field(..., alias="hasApiKey")
    available_providers: List[str] = Field(..., alias="availableProviders")
