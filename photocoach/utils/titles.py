"""
Session title generation.
"""

from ..models.session import DEFAULT_SESSION_TITLE

TITLE_PREVIEW_LENGTH = 30


def generate_session_title(first_message: str, image_count: int = 0) -> str:
    """
    Build a short session label from the first prompt.

    Args:
        first_message: Text of the first user prompt (may be empty)
        image_count: Number of images attached to that prompt

    Returns:
        str: e.g. "📷 2 images - golden hour portraits...", "📷 1 image"
        or DEFAULT_SESSION_TITLE when there is neither text nor images
    """
    preview = (first_message or "")[:TITLE_PREVIEW_LENGTH]
    image_text = ""
    if image_count > 0:
        noun = "image" if image_count == 1 else "images"
        image_text = f"📷 {image_count} {noun}"

    if preview.strip():
        return f"{image_text} - {preview}..." if image_text else f"{preview}..."

    return image_text or DEFAULT_SESSION_TITLE
