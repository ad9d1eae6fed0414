import anyio
import pytest

from imagegen.exceptions import ConfigurationError, UpstreamError
from imagegen.image_generation import StabilityImageGeneration, StabilityImageGenerationParameters
from imagegen.image_generation.models.stability import build_text_prompts
from imagegen.platforms import StabilitySettings

ARTIFACTS = {
    'artifacts': [
        {'base64': 'AAA', 'seed': 1, 'finishReason': 'SUCCESS'},
        {'base64': 'BBB', 'seed': 2, 'finishReason': 'SUCCESS'},
    ]
}


def test_build_text_prompts() -> None:
    assert build_text_prompts('a castle', 'fog') == [{'text': 'a castle', 'weight': 1}, {'text': 'fog', 'weight': -1}]
    assert build_text_prompts('a castle') == [{'text': 'a castle', 'weight': 1}]


def test_parameters_dump_samples() -> None:
    parameters = StabilityImageGenerationParameters(n=3)
    assert parameters.custom_model_dump() == {
        'cfg_scale': 7,
        'height': 1024,
        'width': 1024,
        'samples': 3,
        'steps': 30,
        'style_preset': 'photographic',
    }


def test_stability_request_shape(make_http_client) -> None:
    http_client, handler = make_http_client(200, ARTIFACTS)
    model = StabilityImageGeneration(settings=StabilitySettings(api_key='sk-stability'), http_client=http_client)

    model.generate('a castle', negative_prompt='fog', n=2)

    request = handler.requests[-1]
    assert str(request.url) == 'https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image'
    assert request.headers['Authorization'] == 'Bearer sk-stability'
    assert request.headers['Accept'] == 'application/json'
    body = handler.last_json
    assert body['text_prompts'] == [{'text': 'a castle', 'weight': 1}, {'text': 'fog', 'weight': -1}]
    assert body['samples'] == 2
    assert body['cfg_scale'] == 7
    assert body['steps'] == 30
    assert body['height'] == 1024
    assert body['width'] == 1024
    assert body['style_preset'] == 'photographic'


def test_stability_artifacts_become_png_data_uris(make_http_client) -> None:
    http_client, _ = make_http_client(200, ARTIFACTS)
    model = StabilityImageGeneration(settings=StabilitySettings(api_key='sk-stability'), http_client=http_client)

    output = model.generate('a castle', n=2)

    assert [image.url for image in output.images] == ['data:image/png;base64,AAA', 'data:image/png;base64,BBB']


def test_stability_missing_key_makes_no_request(make_http_client) -> None:
    http_client, handler = make_http_client(200, ARTIFACTS)
    model = StabilityImageGeneration(settings=StabilitySettings(api_key=None), http_client=http_client)

    with pytest.raises(ConfigurationError, match='Stability API key not configured'):
        model.generate('a castle')
    assert handler.requests == []


def test_stability_error_message_is_passed_through(make_http_client) -> None:
    http_client, _ = make_http_client(400, {'name': 'invalid_samples', 'message': 'samples must be <= 10'})
    model = StabilityImageGeneration(settings=StabilitySettings(api_key='sk-stability'), http_client=http_client)

    with pytest.raises(UpstreamError, match='samples must be <= 10'):
        model.generate('a castle')


def test_stability_error_without_message_uses_default(make_http_client) -> None:
    http_client, _ = make_http_client(500, {})
    model = StabilityImageGeneration(settings=StabilitySettings(api_key='sk-stability'), http_client=http_client)

    with pytest.raises(UpstreamError, match='Failed to generate images with Stable Diffusion'):
        model.generate('a castle')


def test_stability_async_generate(make_http_client) -> None:
    http_client, _ = make_http_client(200, ARTIFACTS)
    model = StabilityImageGeneration(settings=StabilitySettings(api_key='sk-stability'), http_client=http_client)

    async def main() -> list:
        output = await model.async_generate('a castle', n=2)
        return [image.url for image in output.images]

    assert anyio.run(main) == ['data:image/png;base64,AAA', 'data:image/png;base64,BBB']
