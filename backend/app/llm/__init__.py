"""
LLM Package

Provider-agnostic access to the upstream models plus the selection logic
that decides which one answers a given input:

  - NVIDIA NIM  (Llama 3.1 70B, OpenAI-compatible endpoint — default)
  - OpenAI      (GPT-4 — reasoning / analysis)
  - Anthropic   (Claude 3 Sonnet — customer service / empathy)
  - Google      (Gemini Pro — reviews / creative)

Public API::

    from app.llm import LLMGateway, StrategySelector

    selection = StrategySelector().select_strategy(user_text)
    gateway   = LLMGateway()
    response  = await gateway.complete(
        gateway.build_messages(system_prompt, user_text),
        selection.selected_model,
        temperature=selection.response_strategy.temperature,
        max_tokens=selection.response_strategy.max_tokens,
    )
"""

from app.llm.errors import LLMServiceError
from app.llm.gateway import GatewayResponse, LLMGateway
from app.llm.router import MODEL_REGISTRY, ModelConfig, Provider, StrategySelector

__all__ = [
    "GatewayResponse",
    "LLMGateway",
    "LLMServiceError",
    "MODEL_REGISTRY",
    "ModelConfig",
    "Provider",
    "StrategySelector",
]
