"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from services.config_manager import ConfigManager
from services.diff_runner import DiffRunner, DiffRunnerError

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    diff: dict | None = None
    view: dict | None = None
    encoders: dict | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    diff: dict
    view: dict
    encoders: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str
    executable: str


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()
    return ConfigResponse(
        diff=config.get("diff", {}),
        view=config.get("view", {}),
        encoders=config.get("encoders", {}),
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_config()

    # Update only provided fields
    if request.diff:
        current_config["diff"] = {**current_config.get("diff", {}), **request.diff}
    if request.view:
        current_config["view"] = {**current_config.get("view", {}), **request.view}
    if request.encoders is not None:
        current_config["encoders"] = request.encoders

    config_manager.save_config(current_config)

    return {"status": "success", "message": "Configuration updated"}


@router.post("/validate", response_model=ValidateResponse)
async def validate_config() -> ValidateResponse:
    """Validate the diff tool by diffing two one-line texts"""
    config = ConfigManager.get_instance().get_config()
    runner = DiffRunner(config.get("diff", {}))

    try:
        output = runner.run("a\n", "b\n")
    except DiffRunnerError as e:
        return ValidateResponse(valid=False, message=str(e), executable=runner.executable)

    if output.startswith("1c1"):
        return ValidateResponse(
            valid=True,
            message=f"{runner.executable} produces normal-format output",
            executable=runner.executable,
        )
    return ValidateResponse(
        valid=False,
        message="Output is not in normal diff format (check baseArgs)",
        executable=runner.executable,
    )
