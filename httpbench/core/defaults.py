"""Default values applied when neither flags nor a config file set them."""

DEFAULT_METHOD = "GET"
DEFAULT_TOTAL_REQUESTS = 100
DEFAULT_PARALLEL_COUNT = 10
DEFAULT_TIMEOUT = "30s"
DEFAULT_CONTENT_TYPE = "application/json"

# Keys accepted in a JSON config file
CONFIG_FILE_KEYS = (
    "url",
    "method",
    "auth_token",
    "total_requests",
    "parallel_count",
    "timeout",
    "headers",
    "parameters",
    "post_data_file",
    "post_data",
    "content_type",
    "dump_failures_dir",
)

STRING_KEYS = (
    "url",
    "method",
    "auth_token",
    "post_data_file",
    "post_data",
    "content_type",
    "dump_failures_dir",
)
INTEGER_KEYS = ("total_requests", "parallel_count")
