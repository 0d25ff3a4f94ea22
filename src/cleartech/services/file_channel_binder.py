"""
File-channel binder - keeps the case record's fileChannelId pointed at the active client's channel
"""

import logging
from typing import Iterable, Optional

from cleartech.models.directory import FileChannel
from cleartech.services.case_state import CaseStateStore

logger = logging.getLogger(__name__)

def find_client_channel(client_id: str, channels: Iterable[FileChannel]) -> Optional[FileChannel]:
    for channel in channels:
        if channel.client_id == client_id and channel.id:
            return channel
    return None

def resolve_file_channel_id(
    client_id: str,
    channels: Iterable[FileChannel],
    current_channel_id: Optional[str],
) -> Optional[dict]:
    """
    Patch needed to bind ``client_id``'s channel, or None when already in step.

    Found and different -> set it; not found while one is set -> clear it.
    """
    channel = find_client_channel(client_id, channels)
    if channel is not None:
        if channel.id != current_channel_id:
            return {"file_channel_id": channel.id}
        return None
    if current_channel_id:
        return {"file_channel_id": None}
    return None

def bind_file_channel(
    store: CaseStateStore,
    client_id: Optional[str],
    channels: Optional[Iterable[FileChannel]],
) -> bool:
    """Run the binder against the store; returns True when the record changed"""
    if not client_id or channels is None:
        return False
    if client_id != store.client_id:
        logger.info(f"Skipping channel binding for inactive client {client_id}")
        return False

    patch = resolve_file_channel_id(client_id, channels, store.record.file_channel_id)
    if patch is None:
        return False

    if patch["file_channel_id"]:
        logger.info(f"Found file channel {patch['file_channel_id']} for client {client_id}")
    else:
        logger.info(f"No file channel found for client {client_id}, clearing stale channel")
    return store.update(patch)
