# src/treemerge/config.py

DEFAULT_EXTENSIONS = "go"
DEFAULT_OUTPUT = "output.txt"
DEFAULT_IGNORED_DIRS = ".git,.idea"
DEFAULT_COMMENT = "//"

# Lookahead that can never succeed, so nothing is ignored by default
DEFAULT_IGNORE_REGEXP = "(?!)"

# Records in flight between the walkers and the sink
CHANNEL_CAPACITY = 4

# How long a blocked producer waits before re-checking for cancellation (seconds)
SEND_POLL_INTERVAL = 0.1

SUMMARY_TOP_N = 10
