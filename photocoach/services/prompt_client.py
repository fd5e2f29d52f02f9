"""
Prompt Client - Sends prompts and photos to the photography coach backend.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiofiles
import httpx

from ..models.session import ApiResponse
from ..core.logging_config import truncate_large_data

logger = logging.getLogger(__name__)

TIMEOUT_ERROR = "Request timeout. Check if backend is running and accessible on your network."


class PromptClient:
    """
    HTTP client for the coach backend.
    Photos go to the analyze endpoint, text-only prompts to camera-settings.
    Transport problems are reported through ApiResponse instead of raised.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        max_images: int = 3,
    ):
        """
        Initialize prompt client.

        Args:
            base_url: Backend API root (e.g. "http://192.168.0.10:8080/api")
            timeout: Request timeout in seconds
            max_images: Maximum images uploaded per prompt; extra images are dropped
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_images = max_images

    async def send_prompt(self, text: str, images: Optional[List[str]] = None) -> ApiResponse:
        """
        Send a prompt with optional images.

        Args:
            text: Prompt text
            images: Image references (file paths or file:// URIs)

        Returns:
            ApiResponse: Coach reply or error description
        """
        if images:
            return await self.analyze_photo(images, text)
        return await self.get_camera_settings(
            text or "general photography",
            "natural light",
            "general",
        )

    async def analyze_photo(self, image_refs: List[str], prompt: str) -> ApiResponse:
        """Upload up to max_images photos with a prompt for analysis."""
        files = []
        for ref in image_refs[:self.max_images]:
            try:
                files.append(("images", await self._read_image(ref)))
            except OSError as e:
                logger.error(f"Error reading image {ref}: {e}")
                return ApiResponse(success=False, error=f"Could not read image: {ref}")

        return await self._post(
            "/analyze",
            fallback_error="Failed to analyze photo",
            data={"prompt": prompt},
            files=files,
        )

    async def get_camera_settings(self, event_type: str, lighting: str, subject: str) -> ApiResponse:
        """Ask for camera settings for a described shooting situation."""
        return await self._post(
            "/camera-settings",
            fallback_error="Failed to get camera settings",
            json={"eventType": event_type, "lighting": lighting, "subject": subject},
        )

    async def _read_image(self, ref: str) -> Tuple[str, bytes, str]:
        path = Path(ref.removeprefix("file://"))
        media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        async with aiofiles.open(path, 'rb') as f:
            content = await f.read()
        return path.name, content, media_type

    async def _post(self, path: str, fallback_error: str, **kwargs: Any) -> ApiResponse:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, **kwargs)
                resp.raise_for_status()
                return ApiResponse.model_validate(resp.json())
        except httpx.TimeoutException:
            logger.error(f"Request to {url} timed out after {self.timeout}s")
            return ApiResponse(success=False, error=TIMEOUT_ERROR)
        except httpx.HTTPStatusError as e:
            error = self._error_from_response(e.response) or fallback_error
            logger.error(f"Backend returned {e.response.status_code} for {url}: {truncate_large_data(error, 500)}")
            return ApiResponse(success=False, error=error)
        except httpx.TransportError as e:
            logger.error(f"Cannot reach backend at {url}: {e}")
            return ApiResponse(
                success=False,
                error=(
                    f"Cannot reach backend at {self.base_url}. Make sure:\n"
                    "1. Backend is running\n"
                    "2. Phone and computer on same Wi-Fi\n"
                    "3. Firewall allows the backend port"
                ),
            )
        except ValueError as e:
            logger.error(f"Unexpected response from {url}: {e}")
            return ApiResponse(success=False, error=fallback_error)

    @staticmethod
    def _error_from_response(response: httpx.Response) -> Optional[str]:
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("error")
        return None
