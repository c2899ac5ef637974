"""
Tests for the conversational research agent factory.
"""

from unittest.mock import MagicMock, patch

import pytest

from defiresearchagent.agent import AGENT_NAME, SYSTEM_PROMPT, create_research_agent
from defiresearchagent.config import ResearchAgentConfig
from defiresearchagent.exceptions import MissingConfigurationError


@pytest.fixture
def config(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
    return ResearchAgentConfig(llm={"api_key": "sk-test", "model_id": "openai/gpt-4o"})


def test_missing_llm_key(config):
    config.llm.api_key = None

    with pytest.raises(MissingConfigurationError) as exc_info:
        create_research_agent(config)

    assert exc_info.value.context["missing_key"] == "api_key"
    assert exc_info.value.context["section"] == "llm"


def test_api_key_check_uses_config_validation(config):
    with patch.object(ResearchAgentConfig, "validate_api_keys", return_value=["LLM API key"]) as mock_check, \
         patch("defiresearchagent.agent.AgnoAgent") as mock_agent:
        with pytest.raises(MissingConfigurationError):
            create_research_agent(config, toolkit=MagicMock())

    mock_check.assert_called_once_with()
    mock_agent.assert_not_called()


def test_model_arguments(config):
    toolkit = MagicMock()
    with patch("defiresearchagent.agent.LiteLLM") as mock_model, \
         patch("defiresearchagent.agent.AgnoAgent") as mock_agent:
        create_research_agent(config, toolkit=toolkit)

    mock_model.assert_called_once_with(id="openai/gpt-4o", api_key="sk-test", temperature=0.3)
    mock_agent.assert_called_once_with(
        model=mock_model.return_value,
        system_message=SYSTEM_PROMPT,
        tools=[toolkit],
        name=AGENT_NAME,
    )


def test_optional_model_arguments(config):
    config.llm.max_tokens = 2048
    config.llm.api_base = "http://localhost:4000"

    with patch("defiresearchagent.agent.LiteLLM") as mock_model, \
         patch("defiresearchagent.agent.AgnoAgent"):
        create_research_agent(config, toolkit=MagicMock())

    kwargs = mock_model.call_args.kwargs
    assert kwargs["max_tokens"] == 2048
    assert kwargs["api_base"] == "http://localhost:4000"


def test_builds_agent_with_research_toolkit(config):
    agent = create_research_agent(config)

    assert agent.name == "DeFiResearch"
    assert agent.system_message == SYSTEM_PROMPT
    assert agent.tools[0].name == "defi_research_toolkit"
