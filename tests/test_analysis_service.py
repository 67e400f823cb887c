"""Tests for the food analysis service."""

import asyncio

import pytest

from can_i_have_this.domain.analysis import NutrientRisk, ThreatLevel
from can_i_have_this.services.analysis import (
    AnalysisFailedError,
    FoodAnalysisService,
    _to_data_url,
    build_instructions,
)
from tests.conftest import ANALYSIS_PAYLOAD, FakeStructuredClient, make_profile


def _service(client: FakeStructuredClient) -> FoodAnalysisService:
    return FoodAnalysisService(
        client=client,
        model="gpt-5.2",
        image_model="gpt-5.2-vision",
        reasoning_effort="high",
        store=False,
    )


def test_analyze_text_returns_structured_result() -> None:
    client = FakeStructuredClient()

    result = asyncio.run(_service(client).analyze_text(make_profile(), "pad thai"))

    assert result.food_name == "Pad Thai"
    assert result.can_eat is False
    assert result.threat_level == ThreatLevel.HIGH
    assert result.risky_ingredients == ["Peanuts", "Garlic"]
    assert result.nutrients[0].risk_impact == 80
    assert client.calls[0]["model"] == "gpt-5.2"
    assert client.calls[0]["image_data_url"] is None
    assert "pad thai" in str(client.calls[0]["prompt"])


def test_analyze_image_sends_data_url_to_image_model() -> None:
    client = FakeStructuredClient()
    png = b"\x89PNG\r\n\x1a\n" + b"rest"

    asyncio.run(_service(client).analyze_image(make_profile(), png))

    assert client.calls[0]["model"] == "gpt-5.2-vision"
    assert str(client.calls[0]["image_data_url"]).startswith("data:image/png;base64,")


def test_analyze_image_accepts_bare_base64() -> None:
    client = FakeStructuredClient()

    asyncio.run(_service(client).analyze_image(make_profile(), "ZmFrZQ=="))

    assert client.calls[0]["image_data_url"] == "data:image/jpeg;base64,ZmFrZQ=="


def test_instructions_include_profile_context() -> None:
    profile = make_profile(
        conditions=["IBS"],
        allergies=["Peanuts"],
        generated_avoidance_list=["Garlic"],
        custom_avoidance_list=["Milk"],
        goals="",
    )

    instructions = build_instructions(profile)

    assert "Conditions: IBS" in instructions
    assert "Explicit allergies: Peanuts" in instructions
    assert "Peanuts, Garlic, Milk" in instructions
    assert "General Health" in instructions


def test_instructions_default_to_none() -> None:
    instructions = build_instructions(make_profile(conditions=[], allergies=[]))

    assert "Conditions: None" in instructions
    assert "Explicit allergies: None" in instructions


def test_malformed_response_raises_analysis_failure() -> None:
    client = FakeStructuredClient(payloads={"food_analysis": {"foodName": "x"}})

    with pytest.raises(AnalysisFailedError):
        asyncio.run(_service(client).analyze_text(make_profile(), "x"))


def test_unknown_threat_level_raises_analysis_failure() -> None:
    client = FakeStructuredClient(
        payloads={"food_analysis": {**ANALYSIS_PAYLOAD, "threatLevel": "SEVERE"}}
    )

    with pytest.raises(AnalysisFailedError):
        asyncio.run(_service(client).analyze_text(make_profile(), "x"))


def test_client_error_raises_analysis_failure() -> None:
    client = FakeStructuredClient(error=ConnectionError("offline"))
    profile = make_profile()

    with pytest.raises(AnalysisFailedError):
        asyncio.run(_service(client).analyze_image(profile, b"bytes"))

    assert profile.journal == []
    assert profile.safe_food_list == []


def test_risk_impact_is_rounded_and_clamped() -> None:
    low = NutrientRisk(name="Salt", amount="1g", risk_impact=-3, reason="r")
    high = NutrientRisk(name="Sugar", amount=12, risk_impact=140.6, reason="r")
    mid = NutrientRisk.model_validate(
        {"name": "Fat", "amount": "3g", "riskImpact": 42.4, "reason": "r"}
    )

    assert low.risk_impact == 0
    assert high.risk_impact == 100
    assert high.amount == "12"
    assert mid.risk_impact == 42


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"
    url = _to_data_url(data)

    assert url.startswith("data:image/png;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    data = b"unknown"
    url = _to_data_url(data)

    assert url.startswith("data:image/jpeg;base64,")
