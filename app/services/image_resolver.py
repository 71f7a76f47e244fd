"""Image catalog deduplication across the pages of one crawl.

The same header logo or hero image is usually referenced from every page of a
site.  Images are keyed by canonical URL; the first occurrence keeps its alt
text and surrounding context, and the logo flag is OR'd across occurrences so
an image spotted in a header on any page stays marked as a logo.
"""

from typing import Dict, Iterable, List

from app.models.page import ImageRef


def merge_images(existing: Iterable[ImageRef], found: Iterable[ImageRef]) -> List[ImageRef]:
    """Return *existing* followed by the unseen entries of *found*.

    Order is first appearance.  Re-applying the same *found* list is a no-op.
    """
    merged: Dict[str, ImageRef] = {}
    for image in [*existing, *found]:
        current = merged.get(image.url)
        if current is None:
            merged[image.url] = image
        elif image.is_logo and not current.is_logo:
            merged[image.url] = current.model_copy(update={"is_logo": True})
    return list(merged.values())
