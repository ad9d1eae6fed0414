import anyio
import pytest

from imagegen.exceptions import ConfigurationError, UpstreamError
from imagegen.image_generation import OpenAIImageGeneration
from imagegen.image_generation.models.openai import combine_prompt
from imagegen.platforms import OpenAISettings


def test_combine_prompt() -> None:
    assert combine_prompt('a red fox', 'blurry') == 'a red fox. Avoid: blurry'
    assert combine_prompt('a red fox') == 'a red fox'
    assert combine_prompt('a red fox', '') == 'a red fox'


def test_openai_request_shape(make_http_client) -> None:
    http_client, handler = make_http_client(200, {'data': [{'url': 'https://cdn.openai.com/1.png', 'revised_prompt': 'fox'}]})
    model = OpenAIImageGeneration(model='dall-e-3', settings=OpenAISettings(api_key='sk-test'), http_client=http_client)

    output = model.generate('a red fox', negative_prompt='blurry', n=1)

    request = handler.requests[-1]
    assert str(request.url) == 'https://api.openai.com/v1/images/generations'
    assert request.headers['Authorization'] == 'Bearer sk-test'
    assert handler.last_json == {
        'model': 'dall-e-3',
        'prompt': 'a red fox. Avoid: blurry',
        'n': 1,
        'size': '1024x1024',
        'quality': 'standard',
        'style': 'natural',
    }
    assert [image.url for image in output.images] == ['https://cdn.openai.com/1.png']
    assert output.images[0].revised_prompt == 'fox'
    assert (output.model_info.type, output.model_info.name) == ('openai', 'dall-e-3')


def test_openai_prompt_unchanged_without_negative_prompt(make_http_client) -> None:
    http_client, handler = make_http_client(200, {'data': []})
    model = OpenAIImageGeneration(model='dall-e-2', settings=OpenAISettings(api_key='sk-test'), http_client=http_client)

    model.generate('a red fox', n=2)

    assert handler.last_json['prompt'] == 'a red fox'
    assert handler.last_json['n'] == 2
    assert handler.last_json['model'] == 'dall-e-2'


def test_openai_b64_json_becomes_data_uri(make_http_client) -> None:
    http_client, _ = make_http_client(200, {'data': [{'b64_json': 'QUJD'}]})
    model = OpenAIImageGeneration(settings=OpenAISettings(api_key='sk-test'), http_client=http_client)

    output = model.generate('a red fox')

    assert output.images[0].url == 'data:image/png;base64,QUJD'


def test_openai_error_message_is_passed_through(make_http_client) -> None:
    http_client, _ = make_http_client(400, {'error': {'message': 'Your request was rejected'}})
    model = OpenAIImageGeneration(settings=OpenAISettings(api_key='sk-test'), http_client=http_client)

    with pytest.raises(UpstreamError, match='Your request was rejected'):
        model.generate('a red fox')


def test_openai_missing_key_makes_no_request(make_http_client) -> None:
    http_client, handler = make_http_client(200, {'data': []})
    model = OpenAIImageGeneration(settings=OpenAISettings(api_key=None), http_client=http_client)

    with pytest.raises(ConfigurationError, match='OpenAI API key not configured'):
        model.generate('a red fox')
    assert handler.requests == []


def test_openai_async_generate(make_http_client) -> None:
    http_client, handler = make_http_client(200, {'data': [{'url': 'https://cdn.openai.com/1.png'}]})
    model = OpenAIImageGeneration(settings=OpenAISettings(api_key='sk-test'), http_client=http_client)

    async def main() -> list:
        output = await model.async_generate('a red fox', negative_prompt='blurry')
        return output.images

    images = anyio.run(main)

    assert images[0].url == 'https://cdn.openai.com/1.png'
    assert handler.last_json['prompt'] == 'a red fox. Avoid: blurry'
