"""Photo preprocessing for handwritten data sheets.

Phone photographs of lab notebooks are often dim, unevenly lit and slightly
soft.  The pipeline below makes digits and table rules easier for a vision
model to read.  It uses only Pillow.

Pipeline
--------
1. EXIF transpose  — phones store portrait shots as rotated landscape pixels
                     plus an orientation tag; apply it so tables are upright.

2. Auto-contrast   — stretches the histogram (ignoring a small cutoff of
                     outlier pixels) to recover faint pencil and grey paper.

3. Unsharp mask    — crisps thin strokes such as decimal points and minus
                     signs without amplifying paper texture.

Colour is kept: corrections are often written in a second ink colour.
"""

import io

from PIL import Image, ImageFilter, ImageOps


def preprocess_for_ocr(image_bytes: bytes) -> bytes:
    """Run the standard preprocessing pipeline and return the result as PNG bytes.

    Raises ``PIL.UnidentifiedImageError`` when *image_bytes* is not an image.
    """
    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)

    # autocontrast does not accept palette or alpha images
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    # cutoff=0.5 ignores the brightest/darkest 0.5 % of pixels (glare, dirt)
    img = ImageOps.autocontrast(img, cutoff=0.5)

    # threshold=3 leaves smooth paper background untouched
    img = img.filter(ImageFilter.UnsharpMask(radius=1.5, percent=150, threshold=3))

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
