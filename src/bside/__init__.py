"""B-Side image transform engine.

Two algorithms turn a small sprite into an upscaled reinterpretation of it:
V1 rebuilds diagonal edges as triangles between same-colored pixel groups,
V2 repeatedly doubles the image and blends similar neighbours.
"""

from bside.color import delta_e, rgb_to_lab
from bside.config import Config, V1Config, V2Config, load_config
from bside.data import Bitmap, ColorGroup, Coordinate, Triangle, pack_color, unpack_color
from bside.errors import BSideError, ParameterError, RenderCancelled, ResourceLimitError
from bside.render import render_v1, render_v2
from bside.v1 import create_bside_image
from bside.v2 import create_bside_v2_image

__version__ = "0.1.0"

__all__ = [
    "BSideError",
    "Bitmap",
    "ColorGroup",
    "Config",
    "Coordinate",
    "ParameterError",
    "RenderCancelled",
    "ResourceLimitError",
    "Triangle",
    "V1Config",
    "V2Config",
    "create_bside_image",
    "create_bside_v2_image",
    "delta_e",
    "load_config",
    "pack_color",
    "render_v1",
    "render_v2",
    "rgb_to_lab",
    "unpack_color",
]
