# settings.py
#
# Description:
# Application-wide constants. The app takes no flags, environment variables
# or config files, so everything tunable lives here.
#

DATABASE_FILE = "todos.json"
LOG_FILE = "todos.log"
LOG_LEVEL = "INFO"

DEFAULT_PAGE_SIZE = 10

# Width of the block of text used for centred titles
BLOCK_WIDTH = 50

# How creation timestamps are shown in the list (local time)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
