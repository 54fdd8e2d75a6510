# src/codectx/config.py

DEFAULT_INCLUDE_PATTERN = ".*"

# Matches a `.git` entry at any depth
GIT_DIR_PATTERN = r"^.*\.git$"

DEFAULT_PATH_SCOPES = ["."]

ROOT_NODE_NAME = "."

# Files larger than this (in bytes) trigger an advisory warning
WARN_FILE_SIZE_THRESHOLD = 100000
