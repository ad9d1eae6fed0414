import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from imagegen.adapter import SUPPORTED_MODEL_IDS, ErrorKind, GenerationFailure, GenerationRequest
from imagegen.app import build_adapter, create_app
from imagegen.gallery import GalleryError, GalleryStore
from imagegen.image_generation import RemoteImageGenerationModel
from imagegen.settings import AppSettings

logger = logging.getLogger(__name__)

app = typer.Typer(name='imagegen', help='Generate images with DALL-E, Stable Diffusion or Gemini.', no_args_is_help=True)


def setup_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def get_gallery(gallery_path: Optional[Path]) -> GalleryStore:
    return GalleryStore(gallery_path or AppSettings().gallery_path)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help='Host to bind, overrides IMAGEGEN_HOST'),
    port: Optional[int] = typer.Option(None, help='Port to bind, overrides IMAGEGEN_PORT'),
    log_level: Optional[str] = typer.Option(None, help='DEBUG, INFO, WARNING or ERROR'),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = AppSettings()
    log_level = (log_level or settings.log_level).upper()
    setup_logging(log_level)
    host = host or settings.host
    port = port or settings.port
    logger.info(f'Starting server on {host}:{port}')
    uvicorn.run(create_app(build_adapter(settings)), host=host, port=port, log_level=log_level.lower())


@app.command()
def generate(
    prompt: str = typer.Argument(..., help='What the image should show'),
    negative_prompt: Optional[str] = typer.Option(None, '--negative-prompt', '-n', help='What the image should avoid'),
    num_images: int = typer.Option(1, '--num-images', min=1),
    model: str = typer.Option('dall-e-3', '--model', '-m', help=f'One of {", ".join(SUPPORTED_MODEL_IDS)}'),
    save: bool = typer.Option(True, '--save/--no-save', help='Append the images to the local gallery'),
    gallery_path: Optional[Path] = typer.Option(None, '--gallery-path'),
) -> None:
    """Generate images and print their URLs."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    try:
        request = GenerationRequest(prompt=prompt, negative_prompt=negative_prompt, num_images=num_images, model=model)
    except ValidationError as e:
        logger.debug(f'Rejected generation request: {e.errors()}')
        typer.echo('Error: Invalid generation request', err=True)
        raise typer.Exit(code=1) from e
    adapter = build_adapter(settings)
    result = adapter.generate(request)
    if isinstance(result, GenerationFailure):
        typer.echo(f'Error: {result.message}', err=True)
        if result.kind is ErrorKind.configuration:
            model_cls = type(adapter.get_model(model))
            if issubclass(model_cls, RemoteImageGenerationModel):
                typer.echo(model_cls.how_to_settings(), err=True)
        raise typer.Exit(code=1)

    for image in result.images:
        typer.echo(image.url)
    if save:
        entries = get_gallery(gallery_path).add_images(result.images, prompt=prompt)
        typer.echo(f'Saved {len(entries)} image(s) to the gallery')


@app.command()
def gallery(gallery_path: Optional[Path] = typer.Option(None, '--gallery-path')) -> None:
    """List previously generated images."""
    try:
        entries = get_gallery(gallery_path).list()
    except GalleryError as e:
        typer.echo(f'Error: {e}', err=True)
        raise typer.Exit(code=1) from e
    if not entries:
        typer.echo('No images yet')
        return
    for entry in entries:
        typer.echo(f'{entry.created_at.isoformat()}  {entry.prompt}\n  {entry.url}')


@app.command('clear-gallery')
def clear_gallery(gallery_path: Optional[Path] = typer.Option(None, '--gallery-path')) -> None:
    """Remove every image from the local gallery."""
    get_gallery(gallery_path).clear()
    typer.echo('Gallery cleared')


@app.command()
def models() -> None:
    """List the supported model ids."""
    for model_id in SUPPORTED_MODEL_IDS:
        typer.echo(model_id)


if __name__ == '__main__':
    app()
