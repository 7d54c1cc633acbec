from md_segmenter.llms.base import LLMResponse, Message, Role, Usage


class TestMessage:
    def test_has_image(self) -> None:
        assert Message(Role.USER, "describe", image_url="https://img/a.png").has_image
        assert not Message(Role.USER, "hello").has_image
        assert not Message(Role.USER, "hello", image_url="").has_image


class TestLLMResponse:
    def test_text_strips_content(self) -> None:
        response = LLMResponse("  摘要 \n", "stop", Usage(), 1.0)

        assert response.text == "摘要"

    def test_text_empty_when_no_content(self) -> None:
        response = LLMResponse(None, "error", Usage(), 1.0)

        assert response.text == ""

    def test_usage_defaults_to_zero(self) -> None:
        assert Usage() == Usage(prompt_tokens=0, completion_tokens=0, total_tokens=0)
