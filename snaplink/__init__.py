# -*- coding: utf-8 -*-

from snaplink.core import mirror_tree
from snaplink.identity import FileIdentity, NodeId, file_identity, identity_token, resolve_node, same_node
from snaplink.logger_utils import get_logger
from snaplink.manifest import LinkEntry, apply_manifest, build_manifest, read_manifest, truncate_file_name

__all__ = [
    'FileIdentity',
    'LinkEntry',
    'NodeId',
    'apply_manifest',
    'build_manifest',
    'file_identity',
    'get_logger',
    'identity_token',
    'mirror_tree',
    'read_manifest',
    'resolve_node',
    'same_node',
    'truncate_file_name',
]
