"""Media type to pre-encoded metadata header lookup."""

import json
from pathlib import Path
from typing import Dict, Mapping, Union

from common.exceptions import MissingHeaderMappingError
from common.logging_config import get_logger

logger = get_logger(__name__)


class HeaderMapping:
    """
    Exact-match lookup of encoded file headers by media type.
    """

    def __init__(self, headers: Mapping[str, bytes]):
        self._headers: Dict[str, bytes] = dict(headers)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> 'HeaderMapping':
        """
        Load a mapping stored as {"media/type": "<hex bytes>"}.

        Args:
            path: Path to the JSON file

        Returns:
            HeaderMapping instance
        """
        with open(path, 'r') as f:
            raw = json.load(f)

        headers = {}
        for media_type, encoded in raw.items():
            hex_value = encoded[2:] if encoded.startswith('0x') else encoded
            headers[media_type] = bytes.fromhex(hex_value)

        logger.debug(f"Loaded {len(headers)} header mapping(s) from {path}")
        return cls(headers)

    def lookup(self, media_type: str) -> bytes:
        """
        Return the encoded header for a media type.

        Raises:
            MissingHeaderMappingError: If the media type is not mapped
        """
        try:
            return self._headers[media_type]
        except KeyError:
            raise MissingHeaderMappingError(media_type) from None

    def __contains__(self, media_type: str) -> bool:
        return media_type in self._headers

    def __len__(self) -> int:
        return len(self._headers)
