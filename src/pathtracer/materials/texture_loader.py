# materials/texture_loader.py
import os

from pathtracer.materials.textures import ImageTexture


def load_texture(image_path: str) -> ImageTexture:
    """
    Read an image from disk into an ImageTexture.

    Args:
        image_path: 24-bit BMP, or any other format Pillow can decode

    Returns:
        ImageTexture sampling the decoded pixels

    Raises:
        FileNotFoundError: If there is no file at image_path
        ValueError: If the file cannot be decoded as an image
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Texture file not found: {image_path}")

    with open(image_path, "rb") as f:
        data = f.read()
    try:
        return ImageTexture.from_bmp_data(data)
    except OSError as e:
        raise ValueError(f"Error loading texture {image_path}: {e}") from e


def create_image_material(image_path: str, material_class, **material_params):
    """
    Build a material whose albedo (or emission) is an image texture.

    Args:
        image_path: Image file to load
        material_class: Material taking the texture as its first argument,
            e.g. Lambertian or DiffuseLight
        **material_params: Passed through to material_class

    Returns:
        The material instance
    """
    texture = load_texture(image_path)
    return material_class(texture, **material_params)
