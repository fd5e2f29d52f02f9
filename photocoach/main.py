"""
Photo Coach - Session manager bootstrap.
"""

import logging

from .config import Settings, settings
from .core.logging_config import setup_logging
from .core.session_manager import SessionManager
from .services.prompt_client import PromptClient
from .storage.local_storage import LocalStorage
from .storage.session_store import SessionStore

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def create_session_manager(config: Settings = settings) -> SessionManager:
    """
    Build a SessionManager wired to local storage and the coach backend.

    Args:
        config: Settings to use (defaults to the module-level settings)

    Returns:
        SessionManager: Ready-to-use manager
    """
    setup_logging(config)

    storage = LocalStorage(config.storage_path)
    store = SessionStore(
        storage,
        max_sessions=config.max_sessions,
        sessions_key=config.sessions_key,
        current_session_key=config.current_session_key,
    )
    client = PromptClient(
        config.api_base_url,
        timeout=config.request_timeout,
        max_images=config.max_images_per_prompt,
    )

    logger.info(f"Starting {config.app_name} v{config.app_version}")
    logger.info(f"Storage path: {storage.base_dir}")
    logger.info(f"Backend: {client.base_url}")

    return SessionManager(
        store,
        send_prompt=client.send_prompt,
        max_prompts=config.max_prompts_per_window,
        window_ms=config.rate_limit_window_ms,
    )
