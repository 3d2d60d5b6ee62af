import io
from PIL import Image

# Dark to light
ASCII_RAMP = "@%#*+=-:. "

# Terminal cells are roughly twice as tall as they are wide
CELL_ASPECT = 0.5


def image_to_ascii(image_bytes: bytes, width: int = 80) -> str:
    """Render PNG/JPEG bytes as monochrome ASCII art for display in a terminal."""
    image = Image.open(io.BytesIO(image_bytes)).convert("L")
    src_width, src_height = image.size
    width = max(1, min(width, src_width))
    height = max(1, int(src_height / src_width * width * CELL_ASPECT))
    image = image.resize((width, height))

    scale = len(ASCII_RAMP) - 1
    pixels = image.tobytes()
    rows = []
    for y in range(height):
        row = pixels[y * width:(y + 1) * width]
        rows.append("".join(ASCII_RAMP[p * scale // 255] for p in row))
    return "\n".join(rows)
