# -*- coding: utf-8 -*-
"""
Central configuration for snaplink.
Contains the manifest naming conventions, directory markers and log location.
"""

import getpass
import os
import tempfile

# Temporary manifest naming (tempfile prefix/suffix)
DATA_PREFIX = "data"
DATA_SUFFIX = "txt"

# Well-known manifest filename inside a snapshot/checkpoint directory
HARDLINK_FILE = "hardLinkFile"

# Marker segment for files that live in the active checkpoint directory
ACTIVE_CHECKPOINT_DIR = "db.checkpoints"

# Manifest field separator
FIELD_SEPARATOR = "\t"

# Log file path
LOG_PATH = os.environ.get(
    "SNAPLINK_LOG_PATH",
    os.path.join(tempfile.gettempdir(), f"snaplink_{getpass.getuser()}.log"),
)
