from __future__ import annotations

from google.adk.agents import Agent
from config.settings import get_model_for_agent
from .prompts import DESCRIPTION, INSTRUCTION


agent = Agent(
    name='discovery_command_generator',
    description=DESCRIPTION,
    model=get_model_for_agent("discovery_command_generator"),
    instruction=INSTRUCTION,
    output_key="discovery_commands",
)
