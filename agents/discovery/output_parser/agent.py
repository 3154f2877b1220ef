from __future__ import annotations

from google.adk.agents import Agent
from config.settings import get_model_for_agent
from .prompts import DESCRIPTION, INSTRUCTION


agent = Agent(
    name='discovery_output_parser',
    description=DESCRIPTION,
    model=get_model_for_agent("discovery_output_parser"),
    instruction=INSTRUCTION,
    output_key="discovery_resources",
)
