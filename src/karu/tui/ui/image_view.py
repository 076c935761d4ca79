"""Half-block image thumbnails for the preview pane.

Each terminal cell shows two pixels stacked vertically: the upper half
block takes the top pixel as foreground and the bottom pixel as background.

Modified: 2025-11-12
"""

from pathlib import Path

from PIL import Image
from rich.color import Color
from rich.style import Style
from rich.text import Text


UPPER_HALF_BLOCK = "▀"


def render_thumbnail(path: Path, width: int, height: int) -> Text:
    """Render an image scaled to fit ``width`` x ``height`` cells.

    Args:
        path: Image file
        width: Available columns
        height: Available rows

    Returns:
        Rich Text with one styled half block per cell

    Raises:
        OSError: If Pillow cannot decode the file
    """
    with Image.open(path) as source:
        image = source.convert("RGB")
    image.thumbnail((max(width, 1), max(height, 1) * 2))
    pixels = image.load()
    image_width, image_height = image.size

    text = Text(no_wrap=True, end="")
    for y in range(0, image_height, 2):
        if y:
            text.append("\n")
        for x in range(image_width):
            top = Color.from_rgb(*pixels[x, y])
            if y + 1 < image_height:
                style = Style(color=top, bgcolor=Color.from_rgb(*pixels[x, y + 1]))
            else:
                style = Style(color=top)
            text.append(UPPER_HALF_BLOCK, style=style)
    return text
