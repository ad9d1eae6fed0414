import anyio
import httpx
import pytest

from imagegen.exceptions import ConfigurationError, UpstreamError
from imagegen.http import HttpClient
from imagegen.image_generation import GeminiImageGeneration
from imagegen.platforms import GeminiSettings

IMAGE_RESPONSE = {
    'candidates': [
        {
            'content': {
                'parts': [
                    {'text': 'Here is your lighthouse.'},
                    {'inlineData': {'mimeType': 'image/jpeg', 'data': 'SkZJRg=='}},
                ]
            }
        }
    ]
}


def test_gemini_request_shape(make_http_client) -> None:
    http_client, handler = make_http_client(200, IMAGE_RESPONSE)
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    model.generate('a lighthouse', negative_prompt='people')

    request = handler.requests[-1]
    assert request.url.path.endswith('/models/gemini-2.0-flash-preview-image-generation:generateContent')
    assert request.headers['x-goog-api-key'] == 'g-test'
    assert handler.last_json == {
        'contents': [{'parts': [{'text': 'a lighthouse. Avoid: people'}]}],
        'generationConfig': {'responseModalities': ['TEXT', 'IMAGE']},
    }


def test_gemini_inline_image_becomes_data_uri(make_http_client) -> None:
    http_client, _ = make_http_client(200, IMAGE_RESPONSE)
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    output = model.generate('a lighthouse')

    assert [image.url for image in output.images] == ['data:image/jpeg;base64,SkZJRg==']


def test_gemini_one_call_per_image(make_http_client) -> None:
    http_client, handler = make_http_client(200, IMAGE_RESPONSE)
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    output = model.generate('a lighthouse', n=3)

    assert len(output.images) == 3
    assert len(handler.requests) == 3


def test_gemini_text_only_response_fails(make_http_client) -> None:
    http_client, _ = make_http_client(200, {'candidates': [{'content': {'parts': [{'text': 'I cannot draw that.'}]}}]})
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    with pytest.raises(UpstreamError, match='Failed to generate image'):
        model.generate('a lighthouse')


def test_gemini_missing_key_makes_no_request(make_http_client) -> None:
    http_client, handler = make_http_client(200, IMAGE_RESPONSE)
    model = GeminiImageGeneration(settings=GeminiSettings(api_key=None), http_client=http_client)

    with pytest.raises(ConfigurationError, match='Gemini API key not configured'):
        model.generate('a lighthouse')
    assert handler.requests == []


def test_gemini_async_generate(make_http_client) -> None:
    http_client, handler = make_http_client(200, IMAGE_RESPONSE)
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    async def main() -> int:
        output = await model.async_generate('a lighthouse', n=2)
        return len(output.images)

    assert anyio.run(main) == 2
    assert len(handler.requests) == 2


def test_gemini_async_generate_waits_for_every_call_before_failing() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(200, json=IMAGE_RESPONSE)
        return httpx.Response(429, json={'error': {'message': 'Resource has been exhausted'}})

    http_client = HttpClient(transport=httpx.MockTransport(handler))
    model = GeminiImageGeneration(settings=GeminiSettings(api_key='g-test'), http_client=http_client)

    async def main() -> None:
        await model.async_generate('a lighthouse', n=3)

    with pytest.raises(UpstreamError, match='Resource has been exhausted'):
        anyio.run(main)
    assert len(calls) == 3
