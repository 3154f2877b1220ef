"""
Runtime and deployment configuration for infraplane discovery.

Reads from environment variables with sensible defaults.
Model selection, executor limits, and storage paths live here.

For domain constants (command grammar, asset catalogue), see config.constants.
For secrets and API keys, see .env.
"""
from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# MODEL CONFIGURATION
# =============================================================================

# Model provider: "gemini" or "zai" (Z.AI GLM via LiteLLM)
MODEL_PROVIDER: str = os.getenv("MODEL_PROVIDER", "gemini")

# Default model, used by both discovery agents unless overridden below
DEFAULT_MODEL: str = os.getenv("DEFAULT_MODEL", "gemini-2.5-flash")

AGENT_MODELS: dict[str, str] = {
    "discovery_command_generator": os.getenv("MODEL_COMMAND_GENERATOR", DEFAULT_MODEL),
    "discovery_output_parser": os.getenv("MODEL_OUTPUT_PARSER", DEFAULT_MODEL),
}


# =============================================================================
# DISCOVERY LIMITS
# =============================================================================

COMMAND_TIMEOUT_SECONDS: float = float(os.getenv("DISCOVERY_COMMAND_TIMEOUT_SECONDS", "30"))
MAX_WORKERS: int = int(os.getenv("DISCOVERY_MAX_WORKERS", "4"))

# Overall deadline for one discovery call; 0 disables it.
DEADLINE_SECONDS: float = float(os.getenv("DISCOVERY_DEADLINE_SECONDS", "120"))

INVENTORY_ENABLED: bool = os.getenv("INVENTORY_ENABLED", "true").lower() in {"1", "true", "yes", "on"}
INVENTORY_TIMEOUT_SECONDS: int = int(os.getenv("INVENTORY_TIMEOUT_SECONDS", "60"))


# =============================================================================
# STORAGE
# =============================================================================

DB_PATH: str = os.getenv("INFRAPLANE_DB_PATH", "./data/infraplane.db")


# =============================================================================
# APPLICATION IDENTITY
# =============================================================================

def app_name() -> str:
    """Application name used by the ADK Runner."""
    return os.getenv("ADK_APP_NAME", "infraplane") or "infraplane"


# =============================================================================
# MODEL FACTORY
# =============================================================================

def get_model_for_agent(agent_name: str) -> Any:
    """Return a model instance for the given agent.

    For ZAI provider, returns a LiteLlm wrapper.
    For Gemini provider, returns the model name string (ADK resolves it).
    """
    model_name = AGENT_MODELS.get(agent_name.lower(), DEFAULT_MODEL)

    if MODEL_PROVIDER == "zai":
        from google.adk.models.lite_llm import LiteLlm

        return LiteLlm(
            model=model_name,
            api_key=os.getenv("ZAI_API_KEY"),
            litellm_params={
                "max_parallel_requests": 1,
                "rpm_limit": 40,
            },
        )

    return model_name
