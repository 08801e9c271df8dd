"""
Transfer Layer

The only layer crossing the process boundary: local document files and
remote share stores. Every import source shares one validation path.
"""

from .codec import deserialize, serialize, validate_document
from .files import export_file, import_file
from .remote import (
    FileRemoteStore,
    HttpRemoteStore,
    InMemoryRemoteStore,
    RemoteStore,
    export_shared,
    generate_share_hash,
    import_shared,
    parse_share_url,
    share_link,
    share_url,
)

__all__ = [
    'deserialize',
    'serialize',
    'validate_document',
    'export_file',
    'import_file',
    'FileRemoteStore',
    'HttpRemoteStore',
    'InMemoryRemoteStore',
    'RemoteStore',
    'export_shared',
    'generate_share_hash',
    'import_shared',
    'parse_share_url',
    'share_link',
    'share_url',
]
