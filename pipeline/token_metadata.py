"""Token metadata assembly and byte encoding for create_token."""

import json
from typing import Any, Dict

from common.constants import ROYALTY_DECIMALS
from pipeline.schemas import MintConfig


def encode_text(value: str) -> bytes:
    return value.encode('utf-8')


def encode_json(value: Any) -> bytes:
    """Compact JSON, UTF-8 encoded, as stored in token metadata bytes."""
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def royalty_shares(creator: str, config: MintConfig) -> Dict[str, Any]:
    return {
        'decimals': ROYALTY_DECIMALS,
        'shares': {creator: config.royalty_basis_points},
    }


def build_create_token_params(
    config: MintConfig,
    artifact_uri: str,
    creator: str,
    media_type: str = '',
) -> Dict[str, bytes]:
    """
    Build the create_token parameters.

    Optional fields are omitted, not sent empty, when unset.

    Args:
        config: Validated mint configuration
        artifact_uri: onchfs:// URI of the stored file
        creator: Creator address, also the sole royalty recipient
        media_type: Media type of the artifact, used for the formats field

    Returns:
        Mapping of field name to encoded bytes
    """
    params = {
        'name': encode_text(config.name),
        'description': encode_text(config.description),
        'artifactUri': encode_text(artifact_uri),
        'creators': encode_json([creator]),
        'royalties': encode_json(royalty_shares(creator, config)),
    }

    if config.tags:
        params['tags'] = encode_json(config.tags)
    if config.attributes:
        params['attributes'] = encode_json([attr.model_dump() for attr in config.attributes])
    if media_type:
        params['formats'] = encode_json([{'uri': artifact_uri, 'mimeType': media_type}])
    if config.license:
        params['license'] = encode_text(config.license)

    return params
