# tests/test_generator.py
import json

import httpx
import pytest

from ollacoder.core.config import DEFAULT_OPTIONS, AssistantConfig
from ollacoder.core.exceptions import GenerationError
from ollacoder.core.generator import OllamaGenerator


def _generator(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OllamaGenerator(base_url="http://ollama.test:11434/", client=client, **kwargs), client


def test_build_payload_without_format():
    generator = OllamaGenerator(model="llama3", client=httpx.AsyncClient())
    payload = generator.build_payload("hello")
    assert payload == {"model": "llama3", "prompt": "hello", "stream": False, "options": DEFAULT_OPTIONS}
    assert "format" not in payload


def test_options_are_merged_over_defaults():
    generator = OllamaGenerator(options={"num_predict": 4096}, client=httpx.AsyncClient())
    options = generator.build_payload("p", "json")["options"]
    assert options["num_predict"] == 4096
    assert options["temperature"] == 0.2


def test_from_config():
    config = AssistantConfig(model="m", base_url="http://h:1", timeout=5.0)
    generator = OllamaGenerator.from_config(config)
    assert generator.model == "m"
    assert generator.base_url == "http://h:1"


@pytest.mark.anyio
async def test_generate_posts_request():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"model": "gpt-oss:20b", "response": '{"answer": "hi"}', "done": True})

    generator, client = _generator(handler)
    async with client:
        text = await generator.generate("question", "json")

    assert text == '{"answer": "hi"}'
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://ollama.test:11434/api/generate"
    body = json.loads(request.content)
    assert body["model"] == "gpt-oss:20b"
    assert body["prompt"] == "question"
    assert body["stream"] is False
    assert body["format"] == "json"
    assert body["options"] == DEFAULT_OPTIONS


@pytest.mark.anyio
async def test_generate_without_format_hint_omits_field():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"response": "ok"})

    generator, client = _generator(handler)
    async with client:
        assert await generator.generate("p") == "ok"
    assert "format" not in bodies[0]


@pytest.mark.anyio
@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(500, text="model not loaded"),
    lambda request: httpx.Response(404, json={"error": "model 'x' not found"}),
    lambda request: httpx.Response(200, text="<html>not json</html>"),
    lambda request: httpx.Response(200, json={"done": True}),
    lambda request: httpx.Response(200, json={"response": None}),
    lambda request: httpx.Response(200, json=["response"]),
])
async def test_bad_responses_raise_generation_error(handler):
    generator, client = _generator(handler)
    async with client:
        with pytest.raises(GenerationError):
            await generator.generate("p")


@pytest.mark.anyio
async def test_transport_errors_raise_generation_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    def too_slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    for handler in (refuse, too_slow):
        generator, client = _generator(handler)
        async with client:
            with pytest.raises(GenerationError) as excinfo:
                await generator.generate("p")
        assert isinstance(excinfo.value.__cause__, httpx.HTTPError)


@pytest.mark.anyio
async def test_injected_client_is_not_closed():
    generator, client = _generator(lambda request: httpx.Response(200, json={"response": "ok"}))
    async with generator:
        await generator.generate("p")
    assert not client.is_closed
    await client.aclose()


@pytest.mark.anyio
async def test_owned_client_is_closed():
    generator = OllamaGenerator()
    async with generator:
        pass
    assert generator._client.is_closed
